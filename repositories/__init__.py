"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all document store calls for a specific domain entity.
Repositories receive domain model objects and translate transport failures into StorageError.
"""
