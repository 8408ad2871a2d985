"""
Example script demonstrating an edit session using Folio.

Optional environment variables in .env:
- FOLIO_STORAGE_DIR: Directory holding the saved portfolio
- FOLIO_COMMIT_POLICY: "autosave" (default) or "explicit"
- FOLIO_ADMIN_EMAIL / FOLIO_ADMIN_PASSWORD: Local admin credentials
"""
import asyncio
import os
from dotenv import load_dotenv

from folio.editing.editor import parse_tags
from folio.interfaces.interface import Folio
from folio.utils.logger import setup_logger
from folio.utils.sanitize import sanitize_url


async def main():
    # Load environment variables
    load_dotenv()
    setup_logger("folio")

    folio = Folio()
    email = os.getenv("FOLIO_ADMIN_EMAIL", "admin@example.com")
    password = os.getenv("FOLIO_ADMIN_PASSWORD", "change-me")

    folio.auth.sign_up(email, password)
    result = folio.auth.sign_in(email, password)
    print(result.message)
    if not result.success:
        return

    session = folio.open_editor()
    session.subscribe(lambda event: print(f"[{event.kind.value}] {event.model.name}"))

    session.set_field("tagline", "I build data tools in Python.")
    project_id = session.add_record("projects")
    session.update_record("projects", project_id, "title", "Portfolio CMS")
    session.update_record("projects", project_id, "tags", parse_tags("Python, pydantic"))

    hero = os.getenv("FOLIO_HERO_IMAGE")
    if hero:
        await session.ingest_file(hero, "heroImage")

    if not session.is_dirty or session.commit():
        print("Changes saved.")
    else:
        print(f"Changes could not be saved: {session.last_error}")

    # Rendering side: read-only, URIs sanitized at use
    for project in folio.data.projects:
        print(f"- {project.title} [{', '.join(project.tags)}] {sanitize_url(project.live_url)}")


if __name__ == "__main__":
    asyncio.run(main())
