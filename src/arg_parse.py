import argparse
from typing import Tuple, Any

LANGUAGES = ['en', 'es']


def setup_parsers() -> argparse.ArgumentParser:
    """Create and configure argument parser"""
    parser = argparse.ArgumentParser(description="Bail bonds back-office assistant CLI")
    parser.add_argument('--db', help='Path to the sqlite database (defaults to BAILDESK_DB_PATH or data/baildesk.db)',
                        default=None)
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Import command
    import_parser = subparsers.add_parser('import', help='Import records from a JSON snapshot file')
    import_parser.add_argument('file', help='Path to a JSON file with clients, cases, bonds, payments, documents')

    # Search command
    search_parser = subparsers.add_parser('search', help='Search clients, cases, bonds, payments and documents')
    search_parser.add_argument('query', nargs='+', help='Free-text search query')
    search_parser.add_argument('--language', choices=LANGUAGES, default='en',
                               help='Language for ranking instructions (default: en)')
    search_parser.add_argument('--json', action='store_true', help='Print results as JSON')

    # Translate command
    translate_parser = subparsers.add_parser('translate', help='Translate text between English and Spanish')
    translate_parser.add_argument('text', help='Text to translate')
    translate_parser.add_argument('--from', dest='from_language', choices=LANGUAGES, default='en',
                                  help='Source language (default: en)')
    translate_parser.add_argument('--to', dest='to_language', choices=LANGUAGES, default='es',
                                  help='Target language (default: es)')

    # Help command
    help_parser = subparsers.add_parser('ask', help='Ask for guidance on using the system')
    help_parser.add_argument('question', nargs='+', help='Question to ask')
    help_parser.add_argument('--language', choices=LANGUAGES, default='en',
                             help='Answer language (default: en)')

    # Verify photo command
    photo_parser = subparsers.add_parser('verify-photo', help='Check a client check-in photo')
    photo_parser.add_argument('file', help='Path to an image file or a text file holding a data URL')
    photo_parser.add_argument('--json', action='store_true', help='Print the verdict as JSON')

    # Compliance command
    compliance_parser = subparsers.add_parser('compliance', help='Analyze compliance for a case')
    compliance_parser.add_argument('case_id', help='ID of the case to analyze')
    compliance_parser.add_argument('--json', action='store_true', help='Print the analysis as JSON')

    # Stats command
    subparsers.add_parser('stats', help='Show record counts')

    return parser


def parse_args(argv=None) -> Tuple[str, Any]:
    """Parse command line arguments and return command and args"""
    parser = setup_parsers()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return None, None

    return args.command, args
