"""MongoDB Student Repository — Motor implementation of StudentRepository.

Invariants:
    - Ids are server-generated ObjectIds exposed as 24-char hex strings
    - An id that is not a valid ObjectId is reported as absent, never as an error
    - Each operation is a single request to the server (no multi-document transactions)
    - PyMongo failures surface as DatabaseError with the driver message only logged

Design Decisions:
    - Documents use camelCase keys (name, age, course, fileUrl, createdAt, updatedAt)
    - update uses a pipeline $set so updatedAt is clamped to createdAt server-side
      within the same atomic request
    - Client created with tz_aware=True so timestamps come back UTC-aware
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from roster.core.domain_types import StudentId
from roster.core.errors import DatabaseError
from roster.core.student import NormalizedStudent, StudentRecord

logger = logging.getLogger(__name__)

COLLECTION_NAME = "students"


def _parse_id(student_id: str) -> ObjectId | None:
    if not ObjectId.is_valid(student_id):
        return None
    return ObjectId(student_id)


def _to_record(doc: dict) -> StudentRecord:
    return StudentRecord(
        id=StudentId(str(doc["_id"])),
        name=doc["name"],
        age=doc["age"],
        course=doc["course"],
        file_url=doc.get("fileUrl"),
        created_at=doc["createdAt"],
        updated_at=doc.get("updatedAt"),
    )


@asynccontextmanager
async def _mongo_errors(operation: str):
    try:
        yield
    except PyMongoError as e:
        logger.error(f"MongoDB {operation} error: {e}")
        raise DatabaseError("Document store operation failed", operation)


class MongoStudentRepository:
    """students collection accessed through Motor."""

    backend_name = "mongo"

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        client: AsyncIOMotorClient | None = None,
    ):
        self.collection = collection
        self.client = client

    @classmethod
    def from_uri(cls, uri: str, database: str) -> "MongoStudentRepository":
        client = AsyncIOMotorClient(uri, tz_aware=True)
        return cls(client[database][COLLECTION_NAME], client)

    async def create(self, student: NormalizedStudent) -> StudentRecord:
        doc = {
            "name": student.name,
            "age": student.age,
            "course": student.course,
            "fileUrl": student.file_url,
            "createdAt": datetime.now(timezone.utc),
            "updatedAt": None,
        }
        async with _mongo_errors("insert"):
            result = await self.collection.insert_one(doc)
        return _to_record({**doc, "_id": result.inserted_id})

    async def list(self) -> list[StudentRecord]:
        async with _mongo_errors("find"):
            docs = await self.collection.find().to_list(length=None)
        return [_to_record(doc) for doc in docs]

    async def get_by_id(self, student_id: StudentId) -> StudentRecord | None:
        oid = _parse_id(student_id)
        if oid is None:
            return None
        async with _mongo_errors("find"):
            doc = await self.collection.find_one({"_id": oid})
        return _to_record(doc) if doc else None

    async def update(
        self, student_id: StudentId, student: NormalizedStudent,
    ) -> StudentRecord | None:
        oid = _parse_id(student_id)
        if oid is None:
            return None
        now = datetime.now(timezone.utc)
        async with _mongo_errors("update"):
            doc = await self.collection.find_one_and_update(
                {"_id": oid},
                [{"$set": {
                    # $literal: a pipeline would read "$..." strings as field paths
                    "name": {"$literal": student.name},
                    "age": student.age,
                    "course": {"$literal": student.course},
                    "updatedAt": {"$max": ["$createdAt", now]},
                }}],
                return_document=ReturnDocument.AFTER,
            )
        return _to_record(doc) if doc else None

    async def delete(self, student_id: StudentId) -> bool:
        oid = _parse_id(student_id)
        if oid is None:
            return False
        async with _mongo_errors("delete"):
            result = await self.collection.delete_one({"_id": oid})
        return result.deleted_count == 1

    async def count(self) -> int:
        async with _mongo_errors("count"):
            return await self.collection.count_documents({})

    async def ping(self) -> bool:
        if self.client is None:
            return True
        try:
            await self.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error(f"MongoDB health check failed: {e}")
            return False

    async def close(self) -> None:
        if self.client is not None:
            self.client.close()
