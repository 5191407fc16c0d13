import json
import logging
from datetime import datetime

from script_deployer.deploy_logger import format_size, get_logger

URL = "http://localhost:4000/api/scripts/app"


def test_stats_count_successes_and_failures(logger):
    logger.log_deploy_success("/scripts/app.js", "app", URL, 200, 2048, 0.25)
    logger.log_deploy_success("/scripts/app.js", "app", URL, 201, 1024, 0.1)
    logger.log_deploy_failure("/scripts/app.js", "app", URL, "Connection failed")

    assert logger.get_stats() == {
        'total_deploys': 3,
        'successful_deploys': 2,
        'failed_deploys': 1,
        'total_size': 3072,
        'success_rate': 66.67,
    }


def test_empty_stats_have_zero_success_rate(logger):
    assert logger.get_stats()['success_rate'] == 0


def test_print_stats_writes_one_summary_line(logger, caplog):
    logger.log_deploy_success("/scripts/app.js", "app", URL, 200, 2048, 0.25)
    logger.log_deploy_failure("/scripts/app.js", "app", URL, "boom", 500)

    with caplog.at_level(logging.INFO, logger="test_deployer"):
        caplog.clear()
        logger.print_stats()

    assert [r.getMessage() for r in caplog.records] == [
        "Session summary: 1/2 deploys succeeded (50.0%), 2.00 KB sent"
    ]


def test_failure_logs_status_and_details(logger, caplog):
    with caplog.at_level(logging.INFO, logger="test_deployer"):
        logger.log_deploy_failure("/scripts/app.js", "app", URL, "boom", 500)

    messages = [record.getMessage() for record in caplog.records]
    assert "✗ Failed to deploy script: app (Status: 500)" in messages
    assert "Error details: boom" in messages


def test_log_dir_gets_text_log_and_json_lines_journal(tmp_path):
    log_dir = tmp_path / "logs"
    logger = get_logger(name="test_deployer_files", log_dir=str(log_dir), console_output=False)

    logger.log_deploy_success("/scripts/app.js", "app", URL, 200, 14, 0.01)
    logger.log_deploy_failure("/scripts/app.js", "app", URL, "nope", 404)

    day = datetime.now().strftime('%Y%m%d')
    lines = (log_dir / f"deploy_{day}.jsonl").read_text(encoding='utf-8').splitlines()
    journal = [json.loads(line) for line in lines]
    assert [entry['status'] for entry in journal] == ['SUCCESS', 'FAILED']
    assert journal[0]['http_status'] == 200
    assert journal[0]['size_bytes'] == 14
    assert journal[1]['http_status'] == 404
    assert journal[1]['error'] == "nope"

    for handler in logger.logger.handlers:
        handler.flush()
    text_log = (log_dir / f"deploy_{day}.log").read_text(encoding='utf-8')
    assert "Successfully deployed script: app" in text_log


def test_journal_appends_across_runs(tmp_path):
    log_dir = tmp_path / "logs"
    day = datetime.now().strftime('%Y%m%d')

    first = get_logger(name="test_deployer_runs", log_dir=str(log_dir), console_output=False)
    first.log_deploy_success("/scripts/app.js", "app", URL, 200, 14, 0.01)
    second = get_logger(name="test_deployer_runs", log_dir=str(log_dir), console_output=False)
    second.log_deploy_success("/scripts/app.js", "app", URL, 200, 14, 0.01)

    lines = (log_dir / f"deploy_{day}.jsonl").read_text(encoding='utf-8').splitlines()
    assert len(lines) == 2


def test_console_only_logger_writes_no_files(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    logger = get_logger(name="test_deployer_console", console_output=False)
    logger.log_deploy_success("/scripts/app.js", "app", URL, 200, 14, 0.01)

    assert list(tmp_path.iterdir()) == []


def test_format_size():
    assert format_size(512) == "512.00 B"
    assert format_size(3072) == "3.00 KB"
    assert format_size(5 * 1024 * 1024) == "5.00 MB"
    assert format_size(2048 * 1024 ** 3) == "2048.00 GB"
