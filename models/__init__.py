#!/usr/bin/env python3
"""Creates the shared DBStorage instance"""
from models.db_storage import DBStorage

storage = DBStorage()
storage.reload()
