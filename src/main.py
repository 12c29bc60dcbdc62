import base64
import json
import logging
import mimetypes
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

import ui
from ai_service import AIService, results_payload
from arg_parse import parse_args
from smartsearch.providers import build_provider
from storage import Database, Repositories, import_snapshot

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class BailDeskCLI:
    def __init__(self, db_path: Optional[str] = None):
        # Get the project root directory
        project_root = Path(__file__).parent.parent
        load_dotenv(project_root / 'config' / '.env')

        # Initialize collaborators as needed
        self.db_path = db_path
        self._db = None
        self._ai = None
        self.last_search_results = None

    @property
    def db(self) -> Database:
        """Lazy initialization of the record database"""
        if self._db is None:
            self._db = Database(self.db_path)
            logger.info(f"Using database at {self._db.path}")
        return self._db

    @property
    def repos(self) -> Repositories:
        return Repositories(self.db.connect())

    @property
    def ai(self) -> AIService:
        """Lazy initialization of the AI service and its provider"""
        if self._ai is None:
            self._ai = AIService(provider=build_provider())
        return self._ai

    def import_records(self, file_path: str) -> bool:
        """Import a JSON snapshot of records into the database"""
        path = Path(file_path)
        if not path.exists():
            logger.error(f"File not found: {file_path}")
            return False

        try:
            payload = json.loads(path.read_text(encoding='utf-8'))
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in {file_path}: {e}")
            return False
        if not isinstance(payload, dict):
            logger.error("Snapshot file must contain a JSON object")
            return False

        with self.db.session() as conn:
            written = import_snapshot(Repositories(conn), payload)
        ui.section("Import", path.name)
        ui.key_value_table([[name, count] for name, count in written.items()])
        return True

    def search(self, query: str, language: str = 'en', as_json: bool = False) -> bool:
        """Search all record types and print ranked results"""
        self.last_search_results = None
        snapshot = self.repos.snapshot()
        outcome = self.ai.search_outcome(query, snapshot, language=language)
        results = outcome.results
        self.last_search_results = results

        if as_json:
            ui.json_output(results_payload(results))
            return True

        ui.section("Search results", outcome.path.value)
        if not results:
            ui.warning("No matching records.")
            return True
        ui.table(
            ["#", "Type", "Title", "Description", "Score"],
            [
                [idx, result.record_type, result.title, result.description, f"{result.relevance_score:.2f}"]
                for idx, result in enumerate(results, 1)
            ],
        )
        return True

    def translate(self, text: str, from_language: str, to_language: str) -> bool:
        translation = self.ai.translate_text(text, from_language, to_language)
        ui.text_panel(translation, title=f"{from_language} → {to_language}")
        return True

    def ask(self, question: str, language: str = 'en') -> bool:
        answer = self.ai.generate_help(question, language)
        ui.text_panel(answer, title="Help")
        return True

    def verify_photo(self, file_path: str, as_json: bool = False) -> bool:
        """Verify a check-in photo given as an image file or a data URL text file"""
        path = Path(file_path)
        if not path.exists():
            logger.error(f"File not found: {file_path}")
            return False

        mime_type, _ = mimetypes.guess_type(path.name)
        if mime_type and mime_type.startswith('image/'):
            encoded = base64.b64encode(path.read_bytes()).decode('ascii')
            image_data = f"data:{mime_type};base64,{encoded}"
        else:
            image_data = path.read_text(encoding='utf-8').strip()

        result = self.ai.verify_checkin_photo(image_data)
        if as_json:
            ui.json_output(result.to_dict())
            return True

        ui.section("Photo verification")
        ui.key_value_table([
            ["Valid photo", result.is_valid_photo],
            ["Person detected", result.person_detected],
            ["Confidence", f"{result.confidence:.2f}"],
            ["Quality", result.quality],
        ])
        ui.bullet_list("Issues", result.issues)
        return True

    def compliance(self, case_id: str, as_json: bool = False) -> bool:
        repos = self.repos
        case = repos.cases.get(case_id)
        if case is None:
            logger.error(f"Case not found: {case_id}")
            return False
        checkins = repos.checkins.list_by_client(case.client_id) if case.client_id else []

        analysis = self.ai.analyze_case_compliance(case, checkins)
        if as_json:
            ui.json_output(analysis.to_dict())
            return True

        ui.section("Compliance", f"Case {case.case_number}")
        ui.key_value_table([
            ["Status", analysis.compliance_status],
            ["Risk level", analysis.risk_level],
        ])
        ui.bullet_list("Insights", analysis.insights)
        ui.bullet_list("Recommendations", analysis.recommendations)
        return True

    def show_stats(self) -> bool:
        counts = self.repos.counts()
        ui.section("Records")
        ui.key_value_table([[name, count] for name, count in counts.items()])
        return True


def main(argv=None):
    command, args = parse_args(argv)

    if not command:
        return 1

    cli = BailDeskCLI(db_path=args.db)
    try:
        if command == 'import':
            ok = cli.import_records(args.file)
        elif command == 'search':
            ok = cli.search(' '.join(args.query), args.language, args.json)
        elif command == 'translate':
            ok = cli.translate(args.text, args.from_language, args.to_language)
        elif command == 'ask':
            ok = cli.ask(' '.join(args.question), args.language)
        elif command == 'verify-photo':
            ok = cli.verify_photo(args.file, args.json)
        elif command == 'compliance':
            ok = cli.compliance(args.case_id, args.json)
        elif command == 'stats':
            ok = cli.show_stats()
        else:
            logger.error(f"Unknown command: {command}")
            ok = False
    except Exception as e:
        logger.error(f"Command failed: {str(e)}")
        return 1
    finally:
        if cli._db is not None:
            cli._db.close()

    return 0 if ok else 1


if __name__ == "__main__":
    exit(main())
