"""
Locations - villages and the collection zones inside them.

Customers optionally belong to a village and a zone. A customer saved with
a zone but no village inherits the zone's village.
"""
