#!/usr/bin/env python3
#USE VENV: source venv/bin/activate
"""
Run script for the Asset Tracker
"""

import argparse
import sys
import os
from dotenv import load_dotenv

# Load environment variables from .env file before the logger reads LOG_DIR
load_dotenv()

from asset_tracker import create_app  # noqa: E402
from asset_tracker.build import build_database, ensure_system_user  # noqa: E402
from asset_tracker.logger import get_logger  # noqa: E402

# Run 'python generate_env.py' to create a .env file with a secure SECRET_KEY.

app = create_app()
logger = get_logger("asset_tracker.run")


def parse_arguments():
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='Asset Tracker')
    parser.add_argument('--build-only', action='store_true',
                        help='Create database tables and critical data, then exit')
    parser.add_argument('--cleanup-knox', action='store_true',
                        help='Clear Knox IDs left on assets that are not checked out, then exit')
    parser.add_argument('--refresh-licenses', action='store_true',
                        help='Mark licenses past their expiration date as expired, then exit')
    return parser.parse_args()


def run_knox_cleanup():
    from asset_tracker.buisness.assets import AssetLifecycleManager

    system_user = ensure_system_user()
    corrected = AssetLifecycleManager.cleanup_orphan_knox_ids(acting_user_id=system_user.id)
    for asset in corrected:
        logger.info(f"Cleared Knox ID on {asset.asset_tag} ({asset.status})")
    logger.info(f"Knox cleanup finished: {len(corrected)} assets corrected")


def run_license_refresh():
    from asset_tracker.buisness.licenses import LicenseSeatManager

    system_user = ensure_system_user()
    expired = LicenseSeatManager.refresh_expired_statuses(acting_user_id=system_user.id)
    logger.info(f"License refresh finished: {len(expired)} licenses expired")


if __name__ == '__main__':
    args = parse_arguments()

    logger.debug("Starting Asset Tracker...")

    with app.app_context():
        # Critical data is ALWAYS checked and inserted
        build_database()

        if args.cleanup_knox:
            run_knox_cleanup()
            sys.exit(0)

        if args.refresh_licenses:
            run_license_refresh()
            sys.exit(0)

    if args.build_only:
        logger.debug("Build completed. Exiting without starting web server.")
        sys.exit(0)

    # FLASK_DEBUG: Enable/disable debug mode (default: False for security)
    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')

    # USE_RELOADER: Enable/disable auto-reloader (default: False in production)
    use_reloader = os.environ.get('USE_RELOADER', 'False').lower() in ('true', '1', 'yes', 'on')

    # FLASK_HOST: Server host (default: 127.0.0.1 for security)
    host = os.environ.get('FLASK_HOST', '127.0.0.1')

    # FLASK_PORT: Server port (default: 5000)
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode}, reloader={use_reloader})")
    app.run(debug=debug_mode, host=host, port=port, use_reloader=use_reloader)
