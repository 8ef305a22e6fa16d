import sys
import json
import logging
import argparse
from pathlib import Path

from make_ready.core.config_manager import ConfigManager
from make_ready.core.errors import InputValidationError
from make_ready.core.make_ready_processor import MakeReadyProcessor
from make_ready.core.output_generator import OutputGenerator

EXIT_OK = 0
EXIT_INVALID_INPUT = 1
EXIT_BAD_FILE = 2


def setup_global_exception_handler():
    """Setup global exception handler to log uncaught exceptions"""
    def global_exception_handler(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        if issubclass(exc_type, RecursionError):
            logging.error("Recursion error detected. Application will exit.")
        else:
            logging.error(f"An unexpected error occurred: {exc_value}", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = global_exception_handler


def abs_path(p):
    p = str(p).strip().strip('"').strip("'")
    return Path(p).expanduser().resolve() if p else None


def load_json(path, label):
    """Read one input export; raises ValueError with a readable message on failure"""
    if path is None or not path.is_file():
        raise ValueError(f"{label} file not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"{label} file {path} is not valid JSON: {e}") from e
    except OSError as e:
        raise ValueError(f"Could not read {label} file {path}: {e}") from e


def build_parser():
    parser = argparse.ArgumentParser(
        prog='make-ready-report',
        description='Generate a make-ready report from a SPIDAcalc export and a Katapult export')
    parser.add_argument('structural_file', help='Path to the SPIDAcalc (structural) JSON export')
    parser.add_argument('survey_file', help='Path to the Katapult (survey) JSON export')
    parser.add_argument('-o', '--output-dir', default='.',
                        help='Directory for the generated workbook (default: current directory)')
    parser.add_argument('--job-name',
                        help='Job name used for the output file name (default: survey file name)')
    parser.add_argument('--config', default='Default', help='Named configuration to load (default: Default)')
    parser.add_argument('--config-dir', help='Directory holding make_ready_config.json and configurations/')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    return parser


def progress(percentage, message):
    logging.info(f"[{percentage:3d}%] {message}")


def main(argv=None):
    """Main application entry point"""
    args = build_parser().parse_args(argv)

    config_manager = ConfigManager(args.config_dir)
    config = config_manager.load_config(args.config)
    debug = args.debug or config.get('processing_options', {}).get('debug_mode', False)

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s',
        handlers=[logging.StreamHandler()]
    )

    setup_global_exception_handler()

    structural_path = abs_path(args.structural_file)
    survey_path = abs_path(args.survey_file)
    try:
        structural = load_json(structural_path, "Structural")
        survey = load_json(survey_path, "Survey")
    except ValueError as e:
        logging.error(str(e))
        return EXIT_BAD_FILE

    try:
        report = MakeReadyProcessor(config).process_data(structural, survey, progress_callback=progress)
    except InputValidationError as e:
        # The validator has already logged each message
        logging.error(f"No report was generated ({len(e.errors)} input error(s))")
        return EXIT_INVALID_INPUT

    generator = OutputGenerator(config)
    job_name = args.job_name or survey_path.stem
    output_file = generator.generate_output_file(job_name, abs_path(args.output_dir) or Path.cwd())
    generator.write_output(report, output_file)
    progress(100, f"Report saved to {output_file}")

    if report.warnings:
        logging.warning(f"Completed with {len(report.warnings)} warning(s)")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
