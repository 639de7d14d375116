"""Bootstrap the vocabulary document store: collections, indexes, sample words.

Run as:
    python -m seed.mongo_init

Reads MONGODB_URI from the environment (or a .env file).  Safe to re-run:
existing collections are left alone, index creation is a no-op for indexes
that already exist, and sample words are upserted by ``word``.
"""

import asyncio
import datetime
from typing import Any

from pymongo import ASCENDING, TEXT, IndexModel
from pymongo.asynchronous.database import AsyncDatabase

from vocab.config import Settings
from vocab.database import create_mongo_client, get_database

SESSION_TTL_SECONDS = 24 * 60 * 60

# ---------------------------------------------------------------------------
# Collections and their $jsonSchema validators (None = no validator)
# ---------------------------------------------------------------------------

COLLECTION_VALIDATORS: dict[str, dict[str, Any] | None] = {
    "words": {
        "$jsonSchema": {
            "bsonType": "object",
            "required": ["word", "language", "createdAt"],
            "properties": {
                "word": {"bsonType": "string"},
                "language": {"bsonType": "string"},
                "definitions": {"bsonType": "array"},
                "examples": {"bsonType": "array"},
                "difficulty": {
                    "bsonType": "string",
                    "enum": ["beginner", "intermediate", "advanced"],
                },
                "createdAt": {"bsonType": "date"},
                "updatedAt": {"bsonType": "date"},
            },
        }
    },
    "sessions": {
        "$jsonSchema": {
            "bsonType": "object",
            "required": ["sessionId", "status", "createdAt"],
            "properties": {
                "sessionId": {"bsonType": "string"},
                "userId": {"bsonType": "string"},
                "words": {"bsonType": "array"},
                "status": {"bsonType": "string", "enum": ["active", "completed", "paused"]},
                "progress": {"bsonType": "object"},
                "createdAt": {"bsonType": "date"},
            },
        }
    },
    "users": None,
    "text_sources": {
        "$jsonSchema": {
            "bsonType": "object",
            "required": ["url", "status", "createdAt"],
            "properties": {
                "url": {"bsonType": "string"},
                "title": {"bsonType": "string"},
                "content": {"bsonType": "string"},
                "status": {
                    "bsonType": "string",
                    "enum": ["pending", "processing", "completed", "failed"],
                },
                "wordCount": {"bsonType": "int"},
                "createdAt": {"bsonType": "date"},
            },
        }
    },
}

# ---------------------------------------------------------------------------
# Indexes
# ---------------------------------------------------------------------------

COLLECTION_INDEXES: dict[str, list[IndexModel]] = {
    "words": [
        IndexModel([("word", ASCENDING)], unique=True),
        IndexModel([("language", ASCENDING)]),
        IndexModel([("difficulty", ASCENDING)]),
        IndexModel([("createdAt", ASCENDING)]),
        IndexModel([("word", TEXT), ("definitions", TEXT)]),
    ],
    "sessions": [
        IndexModel([("sessionId", ASCENDING)], unique=True),
        IndexModel([("userId", ASCENDING)]),
        IndexModel([("status", ASCENDING)]),
        # Sessions expire 24h after creation.
        IndexModel([("createdAt", ASCENDING)], expireAfterSeconds=SESSION_TTL_SECONDS),
    ],
    "users": [
        IndexModel([("email", ASCENDING)], unique=True, sparse=True),
        IndexModel([("createdAt", ASCENDING)]),
    ],
    "text_sources": [
        IndexModel([("url", ASCENDING)], unique=True),
        IndexModel([("status", ASCENDING)]),
        IndexModel([("createdAt", ASCENDING)]),
    ],
}

SAMPLE_WORDS: list[dict[str, Any]] = [
    {
        "word": "vocabulary",
        "language": "en",
        "definitions": ["A body of words used in a particular language"],
        "examples": ["Building vocabulary is essential for language learning"],
        "difficulty": "intermediate",
    },
    {
        "word": "learning",
        "language": "en",
        "definitions": [
            "The acquisition of knowledge or skills through experience, study, or by being taught"
        ],
        "examples": ["Machine learning is a subset of artificial intelligence"],
        "difficulty": "beginner",
    },
]


async def create_collections(db: AsyncDatabase) -> list[str]:
    """Create every missing collection with its validator; return the names created."""
    existing = set(await db.list_collection_names())
    created: list[str] = []
    for name, validator in COLLECTION_VALIDATORS.items():
        if name in existing:
            print(f"  ✓ Collection already exists: {name}")
            continue
        options: dict[str, Any] = {"validator": validator} if validator else {}
        await db.create_collection(name, **options)
        created.append(name)
        print(f"  ✓ Created collection: {name}")
    return created


async def create_indexes(db: AsyncDatabase) -> dict[str, list[str]]:
    """Ensure all declared indexes exist; return index names per collection."""
    names: dict[str, list[str]] = {}
    for collection, indexes in COLLECTION_INDEXES.items():
        names[collection] = await db[collection].create_indexes(indexes)
        print(f"  ✓ {collection}: {len(indexes)} indexes")
    return names


async def seed_words(db: AsyncDatabase) -> int:
    """Upsert the sample words by ``word``; return how many were newly inserted."""
    now = datetime.datetime.now(datetime.UTC)
    inserted = 0
    for word in SAMPLE_WORDS:
        result = await db.words.update_one(
            {"word": word["word"]},
            {"$setOnInsert": {**word, "createdAt": now, "updatedAt": now}},
            upsert=True,
        )
        if result.upserted_id is not None:
            inserted += 1
            print(f"  ✓ Inserted word: {word['word']}")
        else:
            print(f"  ✓ Word already exists: {word['word']}")
    return inserted


async def initialise_database(db: AsyncDatabase) -> dict[str, Any]:
    print("\n[1/3] Creating collections...")
    created = await create_collections(db)

    print("\n[2/3] Creating indexes...")
    indexes = await create_indexes(db)

    print("\n[3/3] Inserting sample data...")
    words_inserted = await seed_words(db)

    return {
        "collections_created": created,
        "indexes": indexes,
        "words_inserted": words_inserted,
    }


async def main() -> None:
    settings = Settings()
    client = create_mongo_client(settings)
    db = get_database(client, settings)

    print("Vocabulary database initialisation")
    print("=" * 50)
    print(f"Database: {db.name}")

    try:
        await initialise_database(db)
    finally:
        await client.close()
    print("\n✓ Database initialisation complete!")


if __name__ == "__main__":
    asyncio.run(main())
