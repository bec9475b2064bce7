import asyncio
import logging
import sys

from core.logger import setup_logging
from config import AppConfig, config

logger = logging.getLogger(__name__)


def exit_code_for(status) -> int:
    """0 when the candidate was created, 1 for any other final status."""
    from candidate_form import SubmissionState

    return 0 if status.state is SubmissionState.SUCCESS else 1


async def submit_profile(app_config: AppConfig, api_client=None) -> int:
    """
    Load the configured profile, attach the configured résumé and submit it.

    Args:
        app_config: Application configuration
        api_client: Optional pre-built client (tests inject a fake here)

    Returns:
        Process exit code
    """
    from candidate_form import CandidateApiClient, CandidateForm, ProfileStore, UploadFile, UploadState

    if not app_config.form_data.profile_path:
        logger.error("CANDIDATE_PROFILE_PATH is not set; nothing to submit.")
        return 1

    try:
        profile = ProfileStore(app_config.form_data.profile_path).load()
    except (OSError, ValueError) as e:
        logger.error(f"Could not load candidate profile: {e}")
        return 1

    api_client = api_client or CandidateApiClient.from_config(app_config.api)
    form = CandidateForm(api_client)
    form.load_profile(profile)

    cv_path = app_config.form_data.cv_path
    if cv_path:
        try:
            form.uploader.select_file(UploadFile.from_path(cv_path))
        except OSError as e:
            logger.error(f"Could not read CV file {cv_path}: {e}")
            return 1
        upload_status = await form.uploader.upload()
        if upload_status.state is not UploadState.UPLOADED:
            logger.warning(f"Submitting without CV: {upload_status.message}")

    status = await form.submit()
    if form.notice:
        logger.info(form.notice.text)
    return exit_code_for(status)


def main() -> int:
    setup_logging(config.logging)
    logger.info(f"Submitting candidate to {config.api.base_url}")
    return asyncio.run(submit_profile(config))


if __name__ == "__main__":
    sys.exit(main())
