import os
import json
import logging

import aiofiles

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


async def write_to_file(filename: str, text: str) -> None:
    """Asynchronously write text to a file in UTF-8 encoding."""
    text_utf8 = text.encode('utf-8', errors='replace').decode('utf-8')
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)
    async with aiofiles.open(filename, "w", encoding='utf-8') as file:
        await file.write(text_utf8)
    logger.info(f"Text written to file: {filename}")


def write_to_json(data: dict, output_path: str) -> str:
    """Write data as indented JSON and return the path."""
    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=str)

    logger.info(f"JSON written to file: {output_path}")
    return output_path
