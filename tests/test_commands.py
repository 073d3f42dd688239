"""Tests for the category, transactions and summary commands."""

from datetime import date

from bucketsort.cli.main import cli
from bucketsort.database.factories import create_sqlite_store
from bucketsort.domain.category import CategoryService
from bucketsort.domain.transaction import TransactionService

from conftest import THIS_YEAR, candidate, run

LOOKBACK = str(max(5, THIS_YEAR - 2024 + 1))


def invoke(cli_runner, temp_store, *args):
    """Run the CLI against the temporary database."""
    return cli_runner.invoke(
        cli, ["--db-path", temp_store.database_path, "--lookback-years", LOOKBACK, *args]
    )


def seed(temp_store, settings):
    """Store default buckets and two sorted transactions for the CLI user."""
    categories = run(CategoryService(temp_store).ensure_default_categories("local"))
    by_name = {c.name: c for c in categories}
    service = TransactionService(temp_store, settings)
    run(service.create_transaction(
        "local", candidate(date(2024, 1, 1), "Rent", "-1200.00"), category_id=by_name["Personal"].id
    ))
    run(service.create_transaction(
        "local", candidate(date(2024, 1, 5), "Coffee", "-4.50"), category_id=by_name["Family"].id
    ))
    return by_name


def fresh_categories(temp_store):
    """Read the CLI user's buckets from a fresh store."""
    store = create_sqlite_store(database_path=temp_store.database_path)
    try:
        return run(CategoryService(store).get_categories("local"))
    finally:
        run(store.disconnect())


def test_help_does_not_need_database(cli_runner, tmp_path):
    """--help works without touching the database."""
    result = cli_runner.invoke(cli, ["--db-path", str(tmp_path / "unused.db"), "--help"])

    assert result.exit_code == 0
    assert "import" in result.output
    assert not (tmp_path / "unused.db").exists()


def test_category_init_and_list(cli_runner, temp_store):
    """init seeds the default buckets once."""
    result = invoke(cli_runner, temp_store, "category", "init")
    assert result.exit_code == 0
    assert "Created 3 default buckets" in result.output

    result = invoke(cli_runner, temp_store, "category", "init")
    assert "Buckets already exist (3)" in result.output

    result = invoke(cli_runner, temp_store, "category", "list")
    assert result.exit_code == 0
    lines = result.output.splitlines()
    names = [line.strip().split(" ")[0] for line in lines if line.startswith("  ")]
    assert names == ["Personal", "Mom", "Family"]


def test_category_list_empty(cli_runner, temp_store):
    """An empty list points to init."""
    result = invoke(cli_runner, temp_store, "category", "list")

    assert result.exit_code == 0
    assert "No buckets found" in result.output


def test_category_add(cli_runner, temp_store):
    """add creates a bucket with a color."""
    result = invoke(cli_runner, temp_store, "category", "add", "Travel", "--color", "#ff0000")

    assert result.exit_code == 0
    assert "Created bucket 'Travel'" in result.output
    categories = fresh_categories(temp_store)
    assert [(c.name, c.color) for c in categories] == [("Travel", "#ff0000")]


def test_category_add_duplicate(cli_runner, temp_store):
    """Duplicate names fail."""
    invoke(cli_runner, temp_store, "category", "add", "Travel")

    result = invoke(cli_runner, temp_store, "category", "add", "travel")

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_category_rename(cli_runner, temp_store):
    """rename changes the bucket name."""
    invoke(cli_runner, temp_store, "category", "add", "Travel")

    result = invoke(cli_runner, temp_store, "category", "rename", "travel", "Trips")

    assert result.exit_code == 0
    assert [c.name for c in fresh_categories(temp_store)] == ["Trips"]


def test_category_rename_missing(cli_runner, temp_store):
    """Renaming an unknown bucket fails."""
    result = invoke(cli_runner, temp_store, "category", "rename", "Nope", "Other")

    assert result.exit_code == 1
    assert "Category 'Nope' not found" in result.output


def test_category_delete_with_move(cli_runner, temp_store, settings):
    """--move-to moves transactions before deleting the bucket."""
    seed(temp_store, settings)

    result = invoke(cli_runner, temp_store, "category", "delete", "Family", "--move-to", "Personal")

    assert result.exit_code == 0
    assert "Moved 1 transaction to 'Personal'" in result.output
    assert "Deleted bucket 'Family'" in result.output
    assert [c.name for c in fresh_categories(temp_store)] == ["Personal", "Mom & Dad"]


def test_transactions_list(cli_runner, temp_store, settings):
    """Sorted transactions are listed newest first with their bucket."""
    seed(temp_store, settings)

    result = invoke(cli_runner, temp_store, "transactions", "list")

    assert result.exit_code == 0
    coffee = result.output.index("Coffee")
    rent = result.output.index("Rent")
    assert coffee < rent
    assert "Family" in result.output


def test_transactions_list_by_category(cli_runner, temp_store, settings):
    """--category filters by bucket name."""
    seed(temp_store, settings)

    result = invoke(cli_runner, temp_store, "transactions", "list", "--category", "personal")

    assert result.exit_code == 0
    assert "Rent" in result.output
    assert "Coffee" not in result.output


def test_transactions_list_empty(cli_runner, temp_store):
    """No stored transactions gives a notice."""
    result = invoke(cli_runner, temp_store, "transactions", "list")

    assert result.exit_code == 0
    assert "No transactions found." in result.output


def test_transactions_delete(cli_runner, temp_store, settings):
    """A transaction is deleted by ID and date."""
    seed(temp_store, settings)
    service = TransactionService(temp_store, settings)
    coffee = next(t for t in run(service.list_transactions("local")) if t.description == "Coffee")

    result = invoke(cli_runner, temp_store, "transactions", "delete", coffee.id, "--date", "2024-01-05")

    assert result.exit_code == 0
    assert f"Deleted transaction {coffee.id}" in result.output


def test_transactions_delete_missing(cli_runner, temp_store):
    """Unknown transaction IDs fail."""
    result = invoke(cli_runner, temp_store, "transactions", "delete", "nope", "--date", "2024-01-05")

    assert result.exit_code == 1
    assert "Transaction nope not found" in result.output


def test_summary(cli_runner, temp_store, settings):
    """summary shows per-bucket totals and a grand total."""
    seed(temp_store, settings)

    result = invoke(cli_runner, temp_store, "summary")

    assert result.exit_code == 0
    assert "Personal" in result.output
    assert "-1,200.00" in result.output
    assert "-1,204.50" in result.output


def test_summary_empty(cli_runner, temp_store):
    """An empty store gives a notice."""
    result = invoke(cli_runner, temp_store, "summary")

    assert result.exit_code == 0
    assert "No buckets or transactions found." in result.output
