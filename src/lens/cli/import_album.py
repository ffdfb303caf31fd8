"""
Create an album from a local directory of images.

Usage:
    invoke --search-root src/lens/cli -c import_album import-album \
        --directory ./photos --email owner@example.com --title "Summer" --privacy public
"""

import os

import structlog
from dotenv import load_dotenv
from invoke import Context, task

from lens.error_handling import LensError
from lens.logging_config import log_context
from lens.services.albums import get_album_service
from lens.services.auth import UserInfo
from lens.services.image_processor import MAX_IMAGES, ImageFile, get_image_processor
from lens.services.store import get_lens_store

logger = structlog.get_logger()

SUPPORTED_EXTENSIONS = [".jpg", ".jpeg", ".png", ".webp"]


def find_image_files(directory: str) -> list[str]:
    """Image files directly inside the directory, sorted by name."""
    return sorted(
        os.path.join(directory, name)
        for name in os.listdir(directory)
        if os.path.isfile(os.path.join(directory, name)) and os.path.splitext(name)[1].lower() in SUPPORTED_EXTENSIONS
    )


def load_image_files(paths: list[str]) -> list[ImageFile]:
    """Read the files and keep the first ones that pass upload validation."""
    files = []
    for path in paths:
        with open(path, "rb") as f:
            files.append(ImageFile(name=os.path.basename(path), data=f.read()))

    accepted, errors = get_image_processor().validate_selection(files, max_files=MAX_IMAGES)
    for error in errors:
        logger.warning("image_skipped", reason=error)
    return accepted


@task
def import_album(
    c: Context,
    directory: str,
    email: str,
    title: str = "",
    description: str = "",
    privacy: str = "private",
    env_file: str = ".env",
    dry_run: bool = False,
):
    """
    Create an album for an existing user from the images in a directory.

    Args:
        c (Context): Invoke context.
        directory (str): Directory containing the images.
        email (str): Email of the album owner.
        title (str): Album title. Defaults to the directory name.
        description (str): Album description.
        privacy (str): 'private' or 'public'. Default is 'private'.
        env_file (str): Path to the environment file. Default is '.env'.
        dry_run (bool): List the images that would be uploaded without creating the album.
    """
    if os.path.exists(env_file):
        logger.info("loading_env_file", env_file=env_file)
        load_dotenv(dotenv_path=env_file)
    else:
        logger.warning("env_file_not_found", env_file=env_file)

    if not os.path.isdir(directory):
        logger.error("directory_not_found", directory=directory)
        return
    if privacy not in ("private", "public"):
        logger.error("invalid_privacy", privacy=privacy)
        return

    title = title or os.path.basename(os.path.normpath(directory))
    files = load_image_files(find_image_files(directory))
    if not files:
        logger.warning("no_images_found", directory=directory)
        return

    if dry_run:
        print(f"\n--- Dry run: album '{title}' ({privacy}) ---")
        for file in files:
            print(f"- {file.name} ({file.size} bytes)")
        print("--- End of dry run ---")
        return

    owner = get_lens_store().get_user_by_email(email)
    if owner is None:
        logger.error("owner_not_found", email=email)
        return

    user = UserInfo(
        user_id=owner["uid"], email=owner["email"], name=owner.get("full_name"), username=owner.get("username")
    )
    with log_context(command="import_album", owner_id=user.user_id, directory=directory) as log:
        try:
            album = get_album_service().create_album(user, title, description, privacy, files)
        except LensError as e:
            log.error("import_album_failed", error=e.user_message, code=e.code)
            return

        log.info("album_imported", album_id=album.id, images_count=album.images_count)
    print(f"Created album {album.id} with {album.images_count} image(s).")
