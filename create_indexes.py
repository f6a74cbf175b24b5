#!/usr/bin/env python3
"""
Script to create the collection indexes
Run this once against a new database; the unique email index backs the
one-account-per-email rule
"""
import sys
import os

# Add the app directory to the path
app_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'app')
sys.path.insert(0, app_dir)

from medicamp.database import connect, ensure_indexes

def create_indexes():
    """Create all collection indexes"""
    try:
        print("Creating indexes...")
        ensure_indexes(connect())
        print("✅ Indexes created successfully!")
        return True
    except Exception as e:
        print(f"❌ Error creating indexes: {e}")
        return False

if __name__ == "__main__":
    if not create_indexes():
        sys.exit(1)
