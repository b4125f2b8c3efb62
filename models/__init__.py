"""
Metadata store.

`storage` is the DBStorage instance shared by the app; create_app() binds it
to the configured DATABASE_URL via storage.reload(url).
"""
from models.db_storage import DBStorage

storage = DBStorage()
