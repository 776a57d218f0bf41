#!/usr/bin/env python3
"""
Bill Organizer - Main Entry Point

Renames scanned bills to provider_yyyy-MM-dd_payment and files them into
year/month folders.

Usage:
    python main.py process [path]   # Organize a directory (default: last used path)
    python main.py config           # Create sample settings file
    python main.py info             # Show environment information
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from bill_organizer.core.config_manager import ConfigurationManager

# Load environment variables early
load_dotenv()

logger = logging.getLogger(__name__)


def setup_basic_logging():
    """Setup basic logging before configuration is loaded."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )


def show_environment_info(config):
    """Show environment information for debugging."""
    env_info = ConfigurationManager.get_environment_info()

    print("🔧 Environment Information:")
    print(f"   Python: {env_info['python_version']}")
    print(f"   Platform: {env_info['platform']}")
    print(f"   Working Directory: {env_info['working_directory']}")

    print("\n⚙️  Configuration:")
    print(f"   Settings File: {config['settings_file']}")
    print(f"   Base Path: {config['paths']['base_path']}")
    print(f"   Last Used Path: {config['paths']['last_used_path'] or '-'}")
    print(f"   Extensions: {', '.join(config['processing']['file_extensions'])}")
    print(f"   Max Concurrent: {config['processing']['max_concurrent_processing']}")
    print(f"   Tesseract Language: {config['ocr']['tesseract_language']}")
    print(f"   Naming Rules: {len(config['naming']['rules'])}")
    print(f"   Save Results: {'Yes' if config['output']['save_results'] else 'No'}")


def resolve_base_path(requested_path, settings_path):
    """Pick the directory to organize: argument, then last used path, then settings."""
    if requested_path:
        if not Path(requested_path).is_dir():
            logger.error(f"❌ Directory not found: {requested_path}")
            sys.exit(1)
        return requested_path

    preview = ConfigurationManager.read_settings_file(
        ConfigurationManager.resolve_settings_path(settings_path))
    last_used = preview.get('last_used_path')
    if last_used and Path(last_used).is_dir():
        logger.info(f"Using last used directory path: {last_used}")
        return last_used
    return None


async def run_process_mode(config):
    """Organize every bill under the configured base path."""
    logger.info(f"🚀 Starting Bill Organizer - Process Mode: {config['paths']['base_path']}")

    from bill_organizer.core.file_service import FileService
    from bill_organizer.core.result_handler import ResultHandler

    rule_set = ConfigurationManager.build_rule_set(config)
    file_service = FileService(config, rule_set)
    result_handler = ResultHandler(config)

    results = await file_service.process_files()

    if not results:
        logger.info("📂 No files found to process")
        return

    summary = ResultHandler.summarize(results)
    logger.info("📋 Processing Summary:")
    for status, count in summary.items():
        logger.info(f"   {status}: {count}")

    failed = [r for r in results if r['status'] == 'failed']
    if failed:
        logger.info("❌ Failed files:")
        for result in failed:
            logger.info(f"   - {result['source']}: {result['error']}")

    saved_path = result_handler.save_batch_results(results)
    if saved_path:
        logger.info(f"💾 Batch results saved to: {saved_path}")


def main():
    """Main entry point."""
    setup_basic_logging()

    parser = argparse.ArgumentParser(
        description="Bill Organizer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py process ~/comprobantes     # Organize a directory
  python main.py process --force            # Re-derive names of already named files
  python main.py config                     # Create sample settings file
  python main.py info                       # Show environment info
        """
    )

    parser.add_argument(
        'mode',
        choices=['process', 'config', 'info'],
        help='Operation mode'
    )

    parser.add_argument(
        'path',
        nargs='?',
        help='Directory to organize (process mode)'
    )

    parser.add_argument(
        '--settings',
        help='Path to the JSON settings file'
    )

    parser.add_argument(
        '--max-concurrency',
        type=int,
        help='Maximum number of files processed at once'
    )

    parser.add_argument(
        '--force',
        action='store_true',
        help='Reprocess files that already follow the naming convention'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Override log level'
    )

    args = parser.parse_args()

    # Handle special modes first
    if args.mode == 'config':
        ConfigurationManager.create_sample_settings_file()
        return

    try:
        base_path = resolve_base_path(args.path, args.settings)

        # Load configuration
        config = ConfigurationManager.load_configuration(args.settings, base_path)

        # Override config with command line arguments
        if args.max_concurrency:
            config['processing']['max_concurrent_processing'] = max(1, args.max_concurrency)

        if args.force:
            config['processing']['force_reprocess_already_named'] = True

        if args.log_level:
            config['logging']['level'] = args.log_level

        ConfigurationManager.setup_logging(config)

        if args.mode == 'info':
            show_environment_info(config)
            return

        if args.path:
            ConfigurationManager.save_last_used_path(args.settings, str(Path(args.path).resolve()))

        asyncio.run(run_process_mode(config))

    except KeyboardInterrupt:
        logger.info("🛑 Application stopped by user")
    except Exception as e:
        logger.error(f"❌ Application failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
