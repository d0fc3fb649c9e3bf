"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all SQL queries for one concern.
Repositories receive raw rows from the database and return model objects;
driver errors leave this layer wrapped in `repositories.errors` types.
"""
