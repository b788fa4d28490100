"""
Pokédex relay service application package.
"""
