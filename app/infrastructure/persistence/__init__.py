"""SQL persistence: engine, ORM models, repositories, migrations."""
