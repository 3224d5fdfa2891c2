import os
import logging
from rich.console import Console
from rich.table import Table

from admin_console.api_client import ApiClientError, TrainingApiClient
from admin_console.config import ConsoleSettings
from admin_console.injector import TestNotFound, TestScoreInjector, active_sessions
from score_core.grading import preview_injection
from score_core.schema import TEST_TYPES
from score_core.synthesizer import SynthesisError, validate_target_percentage

RESET = "\033[0m"
BOLD = "\033[1m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
CYAN = "\033[96m"
MAGENTA = "\033[95m"

console = Console()


def setup_logging():
    os.makedirs("logs", exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        format="[%(asctime)s] %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler("logs/score_console.log", encoding="utf-8"),
            logging.StreamHandler()
        ]
    )


def banner():
    print(f"\n{BOLD}{CYAN}╔══════════════════════════════════════════════════╗{RESET}")
    print(f"{BOLD}{CYAN}║        Super Admin — Test Score Injection        ║{RESET}")
    print(f"{BOLD}{CYAN}╚══════════════════════════════════════════════════╝{RESET}\n")


def pick_session(client: TrainingApiClient):
    sessions = active_sessions(client.list_sessions())
    if not sessions:
        print(f"{YELLOW}No active sessions.{RESET}")
        return None

    print(f"{MAGENTA}Active sessions:{RESET}")
    for i, s in enumerate(sessions, 1):
        label = s.get("name") or s.get("program_name") or s.get("id")
        print(f"  {CYAN}{i}.{RESET} {label}  ({s.get('start_date', '?')} → {s.get('end_date', '?')})")

    raw = input(f"\nSession number (1–{len(sessions)}): ").strip()
    if not raw.isdigit() or not (1 <= int(raw) <= len(sessions)):
        print(f"{RED}Invalid choice.{RESET}")
        return None
    return sessions[int(raw) - 1]


def ask_test_type() -> str:
    raw = input("Test type (pre/post, Enter = pre): ").strip().lower() or "pre"
    if raw not in TEST_TYPES:
        print(f"{YELLOW}Unknown test type, using pre.{RESET}")
        raw = "pre"
    return raw


def ask_score():
    raw = input("Target score 0–100: ").strip()
    try:
        return validate_target_percentage(raw)
    except SynthesisError:
        print(f"{RED}Please enter a valid score between 0-100{RESET}")
        return None


def print_results(results):
    table = Table(title="Injection summary")
    table.add_column("Participant")
    table.add_column("Expected")
    table.add_column("Backend score", justify="right")
    table.add_column("Status")
    for r in results:
        if r.skipped:
            status = "[yellow]skipped (already taken)[/yellow]"
        elif r.error:
            status = f"[red]{r.error}[/red]"
        else:
            status = "[green]passed[/green]" if r.result.passed else "[red]failed[/red]"
        expected = r.expected.summary() if r.expected else "-"
        backend = f"{r.result.score:g}%" if r.result else "-"
        table.add_row(r.participant_id, expected, backend, status)
    console.print(table)


def run_console():
    setup_logging()
    banner()
    try:
        settings = ConsoleSettings.from_env()
    except ValueError as e:
        print(f"{RED}{e}{RESET}")
        return

    with TrainingApiClient(settings) as client:
        injector = TestScoreInjector(client)

        try:
            session = pick_session(client)
        except ApiClientError as e:
            print(f"{RED}Failed to load sessions: {e}{RESET}")
            return
        if not session:
            return
        session_id = str(session.get("id"))
        program_id = str(session.get("program_id"))
        test_type = ask_test_type()
        score = ask_score()
        if score is None:
            return

        try:
            test = client.fetch_test_for_program_and_type(program_id, test_type)
            if test is None:
                raise TestNotFound(program_id, test_type)
            _, expected = preview_injection(score, test)
        except (TestNotFound, ValueError, ApiClientError) as e:
            print(f"{RED}{e}{RESET}")
            return

        print(f"\n{BOLD}Preview:{RESET} {expected.summary()} — pass mark {test.pass_percentage:g}% "
              f"→ {'PASS' if expected.passed else 'FAIL'}")

        try:
            participants = client.list_session_participants(session_id)
        except ApiClientError as e:
            print(f"{RED}Failed to load participants: {e}{RESET}")
            return
        print(f"\n{MAGENTA}Participants:{RESET}")
        print(f"  {CYAN}0.{RESET} All participants (skip those already tested)")
        for i, p in enumerate(participants, 1):
            print(f"  {CYAN}{i}.{RESET} {p.name or p.id} {p.email}")
        raw = input(f"\nParticipant number (0–{len(participants)}, Enter = 0): ").strip() or "0"
        if not raw.isdigit() or int(raw) > len(participants):
            print(f"{RED}Invalid choice.{RESET}")
            return

        confirm = input(f"\nConfirm? (Enter = continue, 'q' = cancel): ").strip().lower()
        if confirm == "q":
            print(f"{RED}Cancelled.{RESET}")
            return

        try:
            if int(raw) == 0:
                results = injector.inject_session(session_id, test_type, score)
            else:
                participant = participants[int(raw) - 1]
                results = [injector.inject(session_id, participant.id, test_type, score)]
        except (TestNotFound, ValueError, ApiClientError) as e:
            print(f"{RED}Failed to submit test: {e}{RESET}")
            logging.exception("Injection failed")
            return

        print_results(results)


if __name__ == "__main__":
    run_console()
