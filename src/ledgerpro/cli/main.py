#!/usr/bin/env python3
"""
LedgerPro CLI - double-entry bookkeeping from the command line.

Usage:
    ledgerpro accounts --type Expense
    ledgerpro post --date 2024-01-15 --description "Cash sale" \\
        --line 1000:500:0 --line 4000:0:500
    ledgerpro history --limit 10
    ledgerpro report balance-sheet --to 2024-12-31 --export bs.xlsx
    ledgerpro import-pdf invoice.pdf --commit
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ledgerpro.core.accounts import ChartOfAccounts
from ledgerpro.core.balance import compute_balances
from ledgerpro.core.database import DatabaseManager
from ledgerpro.core.exceptions import AccountNotFoundError, LedgerError, ValidationError
from ledgerpro.core.journal import DraftEntry, JournalEngine
from ledgerpro.core.paths import PathResolver
from ledgerpro.core.preferences import LedgerPreferences
from ledgerpro.core.store import SQLiteLedgerStore
from ledgerpro.parsers.importer import DocumentImporter
from ledgerpro.reports.exporter import StatementExporter
from ledgerpro.services.statement_service import StatementService

logger = logging.getLogger(__name__)

REPORT_TYPES = ['trial-balance', 'income-statement', 'balance-sheet', 'general-ledger']
ACCOUNT_TYPES = ['Asset', 'Liability', 'Equity', 'Revenue', 'Expense']


def setup_logging(verbose: bool = False, debug: bool = False):
    """Configure logging."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def parse_line_spec(spec: str, chart: ChartOfAccounts) -> dict:
    """
    Parse ACCOUNT_CODE:DEBIT:CREDIT[:DESCRIPTION] into draft line fields.

    Blank amounts are zero, e.g. "5200:1250:" or "1000::1250:Paid rent".
    """
    parts = spec.split(":", 3)
    if len(parts) < 3:
        raise ValidationError(
            f"Invalid line '{spec}'. Expected ACCOUNT_CODE:DEBIT:CREDIT[:DESCRIPTION]",
            field="line",
        )
    code = parts[0].strip()
    account = chart.get_account_by_code(code)
    if account is None:
        raise AccountNotFoundError(code)
    return {
        "account_id": account.id,
        "debit": parts[1],
        "credit": parts[2],
        "description": parts[3] if len(parts) > 3 else "",
    }


def _require_account(chart: ChartOfAccounts, code: str):
    account = chart.get_account_by_code(code)
    if account is None:
        raise AccountNotFoundError(code)
    return account


# ============================================================================
# Command Handlers
# ============================================================================

def cmd_init(args, resolver: PathResolver, store, prefs: LedgerPreferences):
    """Handle init command - create data directories and default preferences."""
    resolver.ensure_dirs()
    prefs_file = resolver.preferences_file()
    if not prefs_file.exists():
        prefs.save(prefs_file)

    accounts = store.list_accounts()
    print(f"\nLedger ready at {resolver.db_path()}")
    print(f"  Accounts:    {len(accounts)}")
    print(f"  Preferences: {prefs_file}")
    return 0


def cmd_reset(args, resolver: PathResolver, store, prefs: LedgerPreferences):
    """Handle reset command - wipe the ledger and re-seed the chart."""
    if not args.yes:
        print("This deletes every account, entry and line. Re-run with --yes to confirm.")
        return 1

    created = ChartOfAccounts(store).reset()
    print(f"\nLedger reset. Seeded {created} accounts.")
    return 0


def cmd_accounts(args, resolver: PathResolver, store, prefs: LedgerPreferences):
    """Handle accounts command - list the chart with balances."""
    chart = ChartOfAccounts(store)
    accounts = chart.list_accounts(args.type)
    balances = {b.account.id: b for b in compute_balances(accounts, store.list_lines())}
    fmt = prefs.display.format_currency

    print(f"\n{'Code':<8}{'Account':<34}{'Type':<11}{'Normal':<8}{'Balance':>16}")
    print("-" * 77)
    for account in accounts:
        balance = balances[account.id].display_balance
        print(
            f"{account.code:<8}{account.name[:33]:<34}{account.account_type.value:<11}"
            f"{account.normal_side.value:<8}{fmt(balance):>16}"
        )
    print(f"\n{len(accounts)} accounts")
    return 0


def cmd_add_account(args, resolver: PathResolver, store, prefs: LedgerPreferences):
    """Handle add-account command."""
    account = ChartOfAccounts(store).add_account(
        args.code, args.name, args.type, args.normal_side
    )
    print(f"Added {account.label} ({account.account_type.value}, {account.normal_side.value})")
    return 0


def cmd_edit_account(args, resolver: PathResolver, store, prefs: LedgerPreferences):
    """Handle edit-account command."""
    chart = ChartOfAccounts(store)
    account = _require_account(chart, args.account)
    account = chart.edit_account(
        account.id,
        code=args.code,
        name=args.name,
        account_type=args.type,
        normal_side=args.normal_side,
    )
    print(f"Updated {account.label} ({account.account_type.value}, {account.normal_side.value})")
    return 0


def cmd_delete_account(args, resolver: PathResolver, store, prefs: LedgerPreferences):
    """Handle delete-account command."""
    chart = ChartOfAccounts(store)
    account = _require_account(chart, args.account)
    chart.delete_account(account.id)
    print(f"Deleted {account.label}")
    return 0


def cmd_post(args, resolver: PathResolver, store, prefs: LedgerPreferences):
    """Handle post command - validate and post a journal entry."""
    chart = ChartOfAccounts(store)
    draft = DraftEntry(
        date=args.date,
        description=args.description,
        reference=args.reference or "",
    )
    for spec in args.line or []:
        draft.add_line(**parse_line_spec(spec, chart))

    entry = JournalEngine(store).post(draft)
    fmt = prefs.display.format_currency
    print(f"\nPosted {entry.reference} on {entry.date}: {entry.description}")
    print(f"  Entry id: {entry.id}")
    print(f"  Total:    {fmt(draft.total_debit)}")
    return 0


def cmd_history(args, resolver: PathResolver, store, prefs: LedgerPreferences):
    """Handle history command - most recent entries first."""
    limit = args.limit if args.limit is not None else prefs.history_limit
    views = JournalEngine(store).history(limit)
    fmt = prefs.display.format_currency

    if not views:
        print("\nNo journal entries yet.")
        return 0

    for view in views:
        entry = view.entry
        print(f"\n{entry.date}  {entry.reference}  {entry.description}  [{entry.id}]")
        for line in view.lines:
            debit = fmt(line.debit) if line.debit else ""
            credit = fmt(line.credit) if line.credit else ""
            print(f"    {view.account_label(line):<40}{debit:>14}{credit:>14}")
        print(f"    {'Totals':<40}{fmt(view.total_debit):>14}{fmt(view.total_credit):>14}")
    return 0


def cmd_show_entry(args, resolver: PathResolver, store, prefs: LedgerPreferences):
    """Handle show-entry command."""
    entry, lines = JournalEngine(store).get_entry(args.entry_id)
    accounts = {a.id: a for a in store.list_accounts()}
    fmt = prefs.display.format_currency

    print(f"\nEntry:       {entry.id}")
    print(f"Date:        {entry.date}")
    print(f"Reference:   {entry.reference}")
    print(f"Description: {entry.description}")
    print(f"Status:      {entry.status.value}")
    print()
    for line in lines:
        account = accounts.get(line.account_id)
        label = account.label if account else line.account_id
        debit = fmt(line.debit) if line.debit else ""
        credit = fmt(line.credit) if line.credit else ""
        print(f"  {line.seq:>2}. {label:<36}{debit:>14}{credit:>14}  {line.description}")
    return 0


def cmd_delete_entry(args, resolver: PathResolver, store, prefs: LedgerPreferences):
    """Handle delete-entry command."""
    JournalEngine(store).delete_entry(args.entry_id)
    print(f"Deleted entry {args.entry_id}")
    return 0


def _print_rows(statement, fmt):
    for row in statement.rows():
        if row.kind == "section":
            print(f"\n{row.label}")
        elif row.kind == "item":
            print(f"  {row.label:<40}{fmt(row.amount):>16}")
        elif row.kind == "subtotal":
            print(f"  {row.label:<40}{fmt(row.amount):>16}")
        else:
            print(f"{row.label.upper():<42}{fmt(row.amount):>16}")


def cmd_report(args, resolver: PathResolver, store, prefs: LedgerPreferences):
    """Handle report command - print and optionally export a statement."""
    service = StatementService(store, prefs)
    fmt = prefs.display.format_currency

    if args.report_type == 'trial-balance':
        statement = service.trial_balance(as_of=args.to_date)
        print(f"\nTrial Balance as of {statement.as_of}")
        print(f"{'Code':<8}{'Account':<34}{'Debit':>16}{'Credit':>16}")
        for row in statement.accounts:
            print(f"{row.code:<8}{row.name[:33]:<34}{fmt(row.debit):>16}{fmt(row.credit):>16}")
        print(f"{'':<8}{'TOTALS':<34}{fmt(statement.total_debit):>16}{fmt(statement.total_credit):>16}")
        print("Balanced" if statement.is_balanced
              else f"Out of balance by {fmt(abs(statement.difference))}")

    elif args.report_type == 'income-statement':
        statement = service.income_statement(args.from_date, args.to_date)
        print(f"\nIncome Statement - {statement.subtitle}")
        _print_rows(statement, fmt)

    elif args.report_type == 'balance-sheet':
        statement = service.balance_sheet(as_of=args.to_date)
        print(f"\nBalance Sheet - {statement.subtitle}")
        _print_rows(statement, fmt)
        print("\nBalanced" if statement.is_balanced
              else f"\nOut of balance by {fmt(abs(statement.difference))}")

    else:
        statement = service.general_ledger(args.account, args.from_date, args.to_date)
        print("\nGeneral Ledger")
        if not statement.accounts:
            print("No transactions found.")
        for section in statement.accounts:
            print(f"\n{section.account.label}")
            for row in section.rows:
                debit = fmt(row.debit) if row.debit else ""
                credit = fmt(row.credit) if row.credit else ""
                print(f"  {row.date}  {row.reference:<16}{row.description[:30]:<31}"
                      f"{debit:>13}{credit:>13}{fmt(row.balance):>14}")
            print(f"  {'Closing balance':<59}{fmt(section.total_debit):>13}"
                  f"{fmt(section.total_credit):>13}{fmt(section.closing_balance):>14}")

    if args.export is not None:
        if args.export:
            target = Path(args.export)
        else:
            filename = prefs.reports.generate_filename(args.report_type.replace('-', '_'))
            target = resolver.report_file(filename)
        path = StatementExporter(prefs.display).export(statement, target)
        print(f"\nExported to {path}")
    return 0


def cmd_dashboard(args, resolver: PathResolver, store, prefs: LedgerPreferences):
    """Handle dashboard command - headline figures."""
    summary = StatementService(store, prefs).dashboard()
    fmt = prefs.display.format_currency

    print("\nLedgerPro Dashboard")
    print(f"  Total Assets:      {fmt(summary.total_assets):>16}")
    print(f"  Total Liabilities: {fmt(summary.total_liabilities):>16}")
    print(f"  Owner Equity:      {fmt(summary.owner_equity):>16}")
    print(f"  Total Revenue:     {fmt(summary.total_revenue):>16}")
    print(f"  Total Expenses:    {fmt(summary.total_expenses):>16}")
    print(f"  Net Income:        {fmt(summary.net_income):>16}")
    print(f"  Active accounts:   {summary.active_accounts}")
    print(f"  Journal entries:   {summary.entry_count}")
    print(f"  Books balanced:    {'Yes' if summary.is_balanced else 'No'}")

    if summary.recent_entries:
        print("\nRecent entries:")
        for view in summary.recent_entries:
            entry = view.entry
            print(f"  {entry.date}  {entry.reference:<18}{entry.description[:36]:<37}"
                  f"{fmt(view.total_debit):>14}")
    return 0


def cmd_import_pdf(args, resolver: PathResolver, store, prefs: LedgerPreferences):
    """Handle import-pdf command - preview (and optionally post) candidates."""
    importer = DocumentImporter(store, preferences=prefs)
    result = importer.preview(Path(args.path), password=args.password)
    fmt = prefs.display.format_currency

    for warning in result.warnings:
        print(f"Warning: {warning}")
    if not result.success:
        for error in result.errors:
            print(f"Error: {error}")
        return 1

    print(f"\nFound {len(result.candidates)} candidate entries in {Path(args.path).name}:")
    for i, candidate in enumerate(result.candidates, 1):
        debit = candidate.debit_account.label if candidate.debit_account else "-"
        credit = candidate.credit_account.label if candidate.credit_account else "-"
        flag = " (review)" if candidate.needs_review else ""
        print(f"  {i:>3}. [{candidate.category.value}] {candidate.description}{flag}")
        print(f"       Dr {debit}  /  Cr {credit}  {fmt(candidate.amount)}")

    if not args.commit:
        print("\nPreview only. Re-run with --commit to post these entries.")
        return 0

    entry_ids = importer.commit(result.candidates, entry_date=args.date)
    print(f"\nPosted {len(entry_ids)} entries.")
    return 0


COMMANDS = {
    'init': cmd_init,
    'reset': cmd_reset,
    'accounts': cmd_accounts,
    'add-account': cmd_add_account,
    'edit-account': cmd_edit_account,
    'delete-account': cmd_delete_account,
    'post': cmd_post,
    'history': cmd_history,
    'show-entry': cmd_show_entry,
    'delete-entry': cmd_delete_entry,
    'report': cmd_report,
    'dashboard': cmd_dashboard,
    'import-pdf': cmd_import_pdf,
}


# ============================================================================
# Main Entry Point
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ledgerpro',
        description='LedgerPro - double-entry bookkeeping',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ledgerpro accounts
  ledgerpro post --date 2024-01-15 --description "Cash sale" --line 1000:500:0 --line 4000:0:500
  ledgerpro report income-statement --from 2024-01-01 --to 2024-12-31
  ledgerpro report general-ledger --account 1000 --export gl.xlsx
  ledgerpro import-pdf invoice.pdf --commit
        """
    )

    # Global arguments
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')
    parser.add_argument('--debug', action='store_true', help='Debug output')
    parser.add_argument('--data-root', help='Data root directory (default: $LEDGERPRO_DATA_ROOT or ./Data)')

    subparsers = parser.add_subparsers(dest='command', help='Command')

    subparsers.add_parser('init', help='Create the ledger and default preferences')

    reset_parser = subparsers.add_parser('reset', help='Delete everything and re-seed the chart')
    reset_parser.add_argument('--yes', action='store_true', help='Confirm the reset')

    accounts_parser = subparsers.add_parser('accounts', help='List the chart of accounts')
    accounts_parser.add_argument('--type', '-t', choices=ACCOUNT_TYPES, help='Only this account type')

    add_parser = subparsers.add_parser('add-account', help='Add an account')
    add_parser.add_argument('--code', required=True, help='Account code')
    add_parser.add_argument('--name', required=True, help='Account name')
    add_parser.add_argument('--type', required=True, choices=ACCOUNT_TYPES, help='Account type')
    add_parser.add_argument('--normal-side', choices=['Debit', 'Credit'],
                            help='Normal side (default: from type)')

    edit_parser = subparsers.add_parser('edit-account', help='Edit an account')
    edit_parser.add_argument('account', help='Current account code')
    edit_parser.add_argument('--code', help='New code')
    edit_parser.add_argument('--name', help='New name')
    edit_parser.add_argument('--type', choices=ACCOUNT_TYPES, help='New type')
    edit_parser.add_argument('--normal-side', choices=['Debit', 'Credit'], help='New normal side')

    delete_parser = subparsers.add_parser('delete-account', help='Delete an unused account')
    delete_parser.add_argument('account', help='Account code')

    post_parser = subparsers.add_parser('post', help='Post a journal entry')
    post_parser.add_argument('--date', '-d', required=True, help='Entry date (YYYY-MM-DD)')
    post_parser.add_argument('--description', required=True, help='Entry description')
    post_parser.add_argument('--reference', '-r', help='Reference (default: JE-<timestamp>)')
    post_parser.add_argument('--line', '-l', action='append',
                             help='ACCOUNT_CODE:DEBIT:CREDIT[:DESCRIPTION] (repeatable)')

    history_parser = subparsers.add_parser('history', help='Recent journal entries')
    history_parser.add_argument('--limit', '-n', type=int, help='Number of entries')

    show_parser = subparsers.add_parser('show-entry', help='Show one journal entry')
    show_parser.add_argument('entry_id', help='Entry id')

    delete_entry_parser = subparsers.add_parser('delete-entry', help='Delete a journal entry')
    delete_entry_parser.add_argument('entry_id', help='Entry id')

    report_parser = subparsers.add_parser('report', help='Financial statements')
    report_parser.add_argument('report_type', choices=REPORT_TYPES, help='Statement')
    report_parser.add_argument('--account', '-a', help='Account code (general ledger only)')
    report_parser.add_argument('--from', dest='from_date', help='Start date (YYYY-MM-DD)')
    report_parser.add_argument('--to', dest='to_date', help='End / as-of date (YYYY-MM-DD)')
    report_parser.add_argument('--export', '-o', nargs='?', const='',
                               help='Export path (.xlsx or .csv); without a path, save under <data-root>/reports')

    subparsers.add_parser('dashboard', help='Headline figures')

    import_parser = subparsers.add_parser('import-pdf', help='Propose entries from a PDF')
    import_parser.add_argument('path', help='PDF file')
    import_parser.add_argument('--password', help='PDF password')
    import_parser.add_argument('--commit', action='store_true', help='Post all proposed entries')
    import_parser.add_argument('--date', help='Entry date for posted entries (default: today)')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose, args.debug)

    resolver = PathResolver(args.data_root)
    prefs = LedgerPreferences.load(resolver.preferences_file())

    try:
        db = DatabaseManager()
        conn = db.init(str(resolver.db_path()))
    except LedgerError as e:
        print(f"Database error: {e.message}")
        return 1

    store = SQLiteLedgerStore(conn)

    try:
        ChartOfAccounts(store).setup()
        return COMMANDS[args.command](args, resolver, store, prefs)

    except LedgerError as e:
        print(f"Error: {e.message}")
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled")
        return 130
    except Exception as e:
        print(f"\nError: {e}")
        if args.debug:
            import traceback
            traceback.print_exc()
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
