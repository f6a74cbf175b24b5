import logging
from datetime import datetime, timezone

from pymongo.database import Database

from medicamp.constant_file import AI_IMAGES
from medicamp.controller import image_generator
from medicamp.database import Repository

logger = logging.getLogger(__name__)


# ------------------ Generate and store image ------------------
async def add_generated_image(db: Database, email: str, prompt: str, category: str):
    image_url = await image_generator.generate_image_url(prompt, category)
    record = {
        "email": email,
        "prompt": prompt,
        "category": category,
        "imageUrl": image_url,
        "createdAt": datetime.now(timezone.utc),
    }
    result = await Repository(db, AI_IMAGES).insert_one(record)
    logger.info("Stored generated image %s for %s", result["insertedId"], email)
    result["imageUrl"] = image_url
    return result


async def retrieve_images(db: Database, email: str):
    return await Repository(db, AI_IMAGES).find_many({"email": email}, sort=[("_id", -1)])
