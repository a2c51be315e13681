"""Integration tests for end-to-end workflows."""

from ledgerline.cli.main import cli


def test_full_workflow(cli_runner, temp_db, tmp_path):
    """Test complete workflow: account -> import -> categorize -> rule reuse -> reconcile."""
    db_args = ["--db-path", temp_db.database_path]

    # Step 1: Create account
    result = cli_runner.invoke(cli, [*db_args, "account", "create", "Checking", "--bank", "Chase"])
    assert result.exit_code == 0

    # Step 2: Import January
    january = tmp_path / "january.csv"
    january.write_text(
        "Posting Date,Description,Debit,Credit\n"
        "01/03/2024,CORNER MARKET,42.10,\n"
        "01/05/2024,ACME PAYROLL,,2500.00\n"
        "01/09/2024,CITY WATER,60.00,\n",
        encoding="utf-8",
    )
    result = cli_runner.invoke(
        cli,
        [
            *db_args,
            "import",
            str(january),
            "--account",
            "Checking",
            "--starting-balance",
            "1000.00",
            "--ending-balance",
            "3397.90",
        ],
    )
    assert result.exit_code == 0
    assert "Imported: 3 transactions" in result.output
    assert "Categorized by rules: 0" in result.output

    # Step 3: Categorize and learn from it
    result = cli_runner.invoke(cli, [*db_args, "categorize", "1", "groceries", "--learn"])
    assert result.exit_code == 0
    assert "Created rule 1: vendor_exact 'CORNER MARKET' -> groceries" in result.output

    result = cli_runner.invoke(cli, [*db_args, "categorize", "3", "utilities", "--learn"])
    assert result.exit_code == 0

    # Step 4: The learned rules categorize the next import
    february = tmp_path / "february.csv"
    february.write_text(
        "Posting Date,Description,Debit,Credit\n"
        "02/02/2024,Corner Market,18.75,\n"
        "02/08/2024,City Water,61.20,\n",
        encoding="utf-8",
    )
    result = cli_runner.invoke(cli, [*db_args, "import", str(february), "--dry-run"])
    assert result.exit_code == 0
    assert "Groceries" in result.output
    assert "Utilities" in result.output

    result = cli_runner.invoke(cli, [*db_args, "import", str(february), "--account", "Checking"])
    assert result.exit_code == 0
    assert "Categorized by rules: 2" in result.output

    # Step 5: Reconcile January
    result = cli_runner.invoke(cli, [*db_args, "reconcile", "status", "1"])
    assert result.exit_code == 0
    difference = next(line for line in result.output.splitlines() if "Difference:" in line)
    assert difference.strip().endswith("$0.00")
    assert "Ready to complete: no" in result.output

    result = cli_runner.invoke(cli, [*db_args, "reconcile", "complete", "1"])
    assert result.exit_code == 1

    for txn_id in ("1", "2", "3"):
        result = cli_runner.invoke(cli, [*db_args, "reconcile", "mark", txn_id])
        assert result.exit_code == 0

    result = cli_runner.invoke(cli, [*db_args, "reconcile", "complete", "1"])
    assert result.exit_code == 0
    assert "Statement 1 reconciled" in result.output

    # Step 6: Reconciled statements are frozen and listed as such
    result = cli_runner.invoke(cli, [*db_args, "statement", "balances", "1", "--ending-balance", "1"])
    assert result.exit_code == 1

    result = cli_runner.invoke(cli, [*db_args, "statement", "list", "--account", "Checking"])
    assert result.exit_code == 0
    assert "reconciled" in result.output
    assert "open" in result.output

    result = cli_runner.invoke(cli, [*db_args, "view", "--unreconciled"])
    assert "Found 2 transaction(s)" in result.output


def test_invoice_workflow(cli_runner, temp_db):
    """Test invoice lifecycle: create -> partial payment -> final payment -> rejected payment."""
    db_args = ["--db-path", temp_db.database_path]

    result = cli_runner.invoke(cli, [*db_args, "invoice", "create", "INV-1", "--total", "1,250.00", "--status", "sent"])
    assert result.exit_code == 0

    result = cli_runner.invoke(cli, [*db_args, "invoice", "pay", "1", "--amount", "250", "--date", "2024-03-01"])
    assert "Balance due: $1,000.00" in result.output

    result = cli_runner.invoke(cli, [*db_args, "invoice", "pay", "1", "--amount", "1000.01", "--date", "2024-03-15"])
    assert result.exit_code == 0
    assert "Status: paid" in result.output

    result = cli_runner.invoke(cli, [*db_args, "invoice", "pay", "1", "--amount", "0.01"])
    assert result.exit_code == 1
    assert "already fully paid" in result.output

    result = cli_runner.invoke(cli, [*db_args, "invoice", "show", "1"])
    assert result.output.count("2024-03-") == 3
