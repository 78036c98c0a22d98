"""
Maintenance cleanup for the upload staging directory.

Staged files are removed when their request finishes. A process that dies
mid-upload cannot run that cleanup, so this sweep removes staged files that
are older than any request could be. Run it periodically (cron, a startup
hook, ...).
"""
from filebox.config import settings
from filebox.dependencies.storage import get_staging_area
from filebox.logging_config import setup_logging
from filebox.storage.staging import UploadStagingArea

logger = setup_logging()


def cleanup_stale_staged_files(
    staging: UploadStagingArea | None = None,
    max_age_minutes: int | None = None,
) -> int:
    """
    Remove staged files left behind by interrupted uploads.

    Args:
        staging: Optional staging area. If not provided, uses get_staging_area().
        max_age_minutes: Optional age threshold. Defaults to STAGED_FILE_MAX_AGE_MINUTES.

    Returns:
        Number of files removed
    """
    if staging is None:
        staging = get_staging_area()

    if max_age_minutes is None:
        max_age_minutes = settings.STAGED_FILE_MAX_AGE_MINUTES

    staged_count = len(staging.list_staged_files())
    removed = staging.remove_stale_files(max_age_seconds=max_age_minutes * 60)

    logger.info(
        f"Staging cleanup: {staged_count} staged files, "
        f"{removed} older than {max_age_minutes} minutes removed"
    )

    return removed
