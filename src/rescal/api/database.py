from rescal.storage.database_adapter import DatabaseAdapter, DatabaseConfig

# Singletons
_database_adapter: DatabaseAdapter | None = None

def get_database_adapter() -> DatabaseAdapter:
    global _database_adapter
    if not _database_adapter:
        config = DatabaseConfig()
        _database_adapter = DatabaseAdapter(config)
    return _database_adapter

def close_database_adapter():
    global _database_adapter
    if _database_adapter:
        _database_adapter.close()
        _database_adapter = None
