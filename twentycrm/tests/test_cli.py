"""Tests for the twentycrm-generate command."""

from twentycrm.cli import build_parser, main, resolve_config


def test_generate_from_flags(tmp_path, mock_transport, metadata_payload, capsys):
    mock_transport.request.return_value = metadata_payload
    output = tmp_path / "crm"

    status = main(
        [
            "--package", "crm",
            "--output", str(output),
            "--api-url", "https://crm.example.com/rest",
            "--api-token", "tok",
            "--entities", "person",
            "--no-services",
        ],
        transport=mock_transport,
    )

    assert status == 0
    assert (output / "person.py").exists()
    assert (output / "person_collection.py").exists()
    assert not (output / "person_service.py").exists()
    assert "person.py" in capsys.readouterr().out


def test_generate_all(tmp_path, mock_transport, metadata_payload):
    mock_transport.request.return_value = metadata_payload
    output = tmp_path / "crm_all"

    status = main(
        ["--package", "crm_all", "--output", str(output), "--api-url", "u", "--api-token", "t", "--all"],
        transport=mock_transport,
    )

    assert status == 0
    assert (output / "company_service.py").exists()


def test_failure_exit_status(tmp_path, mock_transport, metadata_payload, capsys):
    mock_transport.request.return_value = metadata_payload
    status = main(
        ["--package", "crm", "--output", str(tmp_path), "--api-url", "u", "--api-token", "t", "--entities", "ghost"],
        transport=mock_transport,
    )
    assert status == 1
    assert "ghost" in capsys.readouterr().err


def test_missing_package_fails(mock_transport, capsys):
    assert main(["--api-url", "u", "--api-token", "t"], transport=mock_transport) == 1


def test_flags_override_config_file(tmp_path, monkeypatch):
    monkeypatch.setenv("TEST_CLI_TOKEN", "secret")
    path = tmp_path / "codegen.yaml"
    path.write_text(
        'package: crm\noutput_dir: out\napi:\n  api_url: https://x/rest\n  api_token: env("TEST_CLI_TOKEN")\n'
        "entities: [person]\n"
    )
    args = build_parser().parse_args(["--config", str(path), "--entities", "company", "--overwrite", "--no-collections"])

    config = resolve_config(args)

    assert config.entities == ["company"]
    assert config.api.api_token == "secret"
    assert config.options.overwrite
    assert not config.options.generate_collections
    assert config.options.generate_services
