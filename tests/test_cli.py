"""
Tests for the CLI module.
"""

import os
import json
import pytest
from unittest.mock import patch, MagicMock
from click.testing import CliRunner

from conceptlab.cli import main
from conceptlab.audience2concept.models import GeneratedConcept
from conceptlab.store.concept_store import JsonConceptStore


class TestCLI:
    """
    Tests for the CLI module.
    """

    @pytest.fixture
    def runner(self):
        """
        Click CLI test runner.
        """
        return CliRunner()

    @pytest.fixture
    def audiences_file(self, tmp_path, full_audience_record):
        """
        Create an audience records file for testing.
        """
        path = tmp_path / "audiences.json"
        path.write_text(json.dumps([full_audience_record]))
        return str(path)

    @pytest.fixture
    def output_dir(self, tmp_path):
        return str(tmp_path / "concepts")

    @pytest.fixture
    def mock_service(self):
        service = MagicMock()
        service.generate.return_value = GeneratedConcept(title="Level Up Weekends", description="Squad play.")
        service.remix.return_value = GeneratedConcept(title="Level Up Again", description="Now with friends.")
        with patch("conceptlab.audience2concept.concept_service.create_concept_service") as mock_create:
            mock_create.return_value = service
            yield service

    def test_main_help(self, runner):
        """
        Test the main help command.
        """
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        for command in ("describe", "generate", "remix", "serve"):
            assert command in result.output

    def test_describe(self, runner, audiences_file):
        result = runner.invoke(main, ["describe", audiences_file, "aud-1", "-u", "user-a"])

        assert result.exit_code == 0
        assert result.output.startswith("Name: Weekend Gamers | Age: 18-34 years old")

    def test_describe_foreign_audience(self, runner, audiences_file):
        result = runner.invoke(main, ["describe", audiences_file, "aud-1", "-u", "user-b"])

        assert result.exit_code == 1
        assert "You can only use your own audiences" in result.output

    def test_generate(self, runner, audiences_file, output_dir, mock_service):
        """
        Test generating and saving a concept.
        """
        result = runner.invoke(main, [
            "generate", audiences_file, "aud-1",
            "-u", "user-a",
            "-c", "product launch",
            "-t", "playful",
            "-o", output_dir
        ])

        assert result.exit_code == 0
        assert "Level Up Weekends" in result.output
        assert "Saved as concept" in result.output

        audience = mock_service.generate.call_args[0][0]
        assert audience.id == "aud-1"
        assert mock_service.generate.call_args[1]["campaign_type"] == "product launch"
        assert mock_service.generate.call_args[1]["tone"] == "playful"

        saved = os.listdir(output_dir)
        assert len(saved) == 1
        with open(os.path.join(output_dir, saved[0])) as f:
            record = json.load(f)
        assert record["user_id"] == "user-a"
        assert record["audience_snapshots"][0]["name"] == "Weekend Gamers"

    def test_generate_json_without_saving(self, runner, audiences_file, output_dir, mock_service):
        result = runner.invoke(main, [
            "generate", audiences_file, "aud-1", "-u", "user-a", "-o", output_dir, "--no-save", "--json"
        ])

        assert result.exit_code == 0
        assert json.loads(result.output) == {"title": "Level Up Weekends", "description": "Squad play."}
        assert not os.path.exists(output_dir)

    def test_generate_fallback_warns(self, runner, audiences_file, output_dir, mock_service):
        mock_service.generate.return_value = GeneratedConcept(
            title="Campaign for Weekend Gamers", description="Fallback", degraded=True
        )

        result = runner.invoke(main, ["generate", audiences_file, "aud-1", "-u", "user-a", "-o", output_dir])

        assert result.exit_code == 0
        assert "fallback concept" in result.output

    def test_generate_foreign_audience(self, runner, audiences_file, output_dir, mock_service):
        """
        Test that a foreign audience is rejected before any generation.
        """
        result = runner.invoke(main, ["generate", audiences_file, "aud-1", "-u", "user-b", "-o", output_dir])

        assert result.exit_code == 1
        assert "You can only use your own audiences" in result.output
        assert mock_service.generate.call_count == 0

    def test_generate_missing_api_key(self, runner, audiences_file, output_dir):
        with patch("conceptlab.audience2concept.concept_service.create_concept_service") as mock_create:
            mock_create.side_effect = ValueError("OPENAI_API_KEY environment variable is required but not set.")
            result = runner.invoke(main, ["generate", audiences_file, "aud-1", "-u", "user-a", "-o", output_dir])

        assert result.exit_code == 1
        assert "OPENAI_API_KEY" in result.output

    def test_generate_multiple_audiences(self, runner, tmp_path, output_dir, mock_service, full_audience_record):
        """
        Test that extra audiences are named in the context and all are saved.
        """
        path = tmp_path / "two_audiences.json"
        path.write_text(json.dumps([
            full_audience_record,
            {"id": "aud-3", "user_id": "user-a", "name": "Night Owls", "demographics": {}}
        ]))

        result = runner.invoke(main, [
            "generate", str(path), "aud-1", "aud-3", "aud-1",
            "-u", "user-a",
            "--context", "Summer sale",
            "-o", output_dir,
            "--json"
        ])

        assert result.exit_code == 0
        assert mock_service.generate.call_count == 1
        assert mock_service.generate.call_args[0][0].id == "aud-1"
        assert mock_service.generate.call_args[1]["additional_context"] == (
            "Summer sale\n\nTarget multiple audiences: Weekend Gamers, Night Owls"
        )
        record = json.loads(result.output)
        assert record["audience_id"] == "aud-1"
        assert [snapshot["name"] for snapshot in record["audience_snapshots"]] == ["Weekend Gamers", "Night Owls"]

    def test_generate_multiple_audiences_one_foreign(self, runner, tmp_path, output_dir, mock_service,
                                                     full_audience_record):
        path = tmp_path / "two_audiences.json"
        path.write_text(json.dumps([
            full_audience_record,
            {"id": "aud-9", "user_id": "user-b", "name": "Someone Else's", "demographics": {}}
        ]))

        result = runner.invoke(main, ["generate", str(path), "aud-1", "aud-9", "-u", "user-a", "-o", output_dir])

        assert result.exit_code == 1
        assert "You can only use your own audiences" in result.output
        assert mock_service.generate.call_count == 0

    def test_remix_stored_concept(self, runner, audiences_file, output_dir, mock_service, gamers):
        """
        Test remixing a concept saved earlier.
        """
        store = JsonConceptStore(output_dir)
        original = store.save_concept(GeneratedConcept(title="Level Up", description="A gaming push."), [gamers], "user-a")

        result = runner.invoke(main, [
            "remix", audiences_file, "aud-1",
            "-u", "user-a",
            "--concept", original["id"],
            "-i", "More co-op",
            "-o", output_dir,
            "--json"
        ])

        assert result.exit_code == 0
        record = json.loads(result.output)
        assert record["title"] == "Level Up Again"
        assert record["source_concept_id"] == original["id"]

        remixed, audience = mock_service.remix.call_args[0]
        assert remixed == GeneratedConcept(title="Level Up", description="A gaming push.")
        assert audience.id == "aud-1"
        assert mock_service.remix.call_args[1] == {"remix_instructions": "More co-op"}

    def test_remix_concept_file(self, runner, audiences_file, output_dir, mock_service, tmp_path):
        concept_file = tmp_path / "concept.json"
        concept_file.write_text(json.dumps({"title": "Level Up", "description": "A gaming push."}))

        result = runner.invoke(main, [
            "remix", audiences_file, "aud-1", "-u", "user-a",
            "--concept", str(concept_file), "-o", output_dir, "--no-save"
        ])

        assert result.exit_code == 0
        assert "Level Up Again" in result.output

    def test_remix_someone_elses_concept(self, runner, audiences_file, output_dir, mock_service, gamers):
        store = JsonConceptStore(output_dir)
        original = store.save_concept(GeneratedConcept(title="Theirs", description="Not yours."), [gamers], "user-b")

        result = runner.invoke(main, [
            "remix", audiences_file, "aud-1", "-u", "user-a", "--concept", original["id"], "-o", output_dir
        ])

        assert result.exit_code == 1
        assert "Concept not found" in result.output
        assert mock_service.remix.call_count == 0

    def test_remix_defaults_to_saved_audiences(self, runner, audiences_file, output_dir, mock_service,
                                               full_audience, gamers):
        """
        Test that a remix without an audience id uses the concept's own snapshots.
        """
        store = JsonConceptStore(output_dir)
        original = store.save_concept(
            GeneratedConcept(title="Level Up", description="A gaming push."), [full_audience, gamers], "user-a"
        )

        result = runner.invoke(main, [
            "remix", audiences_file, "-u", "user-a", "--concept", original["id"], "-o", output_dir, "--json"
        ])

        assert result.exit_code == 0
        audience = mock_service.remix.call_args[0][1]
        assert audience.id == "aud-1"
        assert audience.demographics.interests == ["co-op games", "streaming"]
        assert mock_service.remix.call_args[1] == {"remix_instructions": None}

        record = json.loads(result.output)
        assert record["source_concept_id"] == original["id"]
        assert record["audience_id"] == "aud-1"
        assert record["audience_snapshots"] == original["audience_snapshots"]

    def test_remix_falls_back_to_audience_id(self, runner, audiences_file, output_dir, mock_service, tmp_path):
        concept_file = tmp_path / "concept.json"
        concept_file.write_text(json.dumps({
            "title": "Level Up", "description": "A gaming push.", "audience_id": "aud-1"
        }))

        result = runner.invoke(main, [
            "remix", audiences_file, "-u", "user-a", "--concept", str(concept_file), "-o", output_dir, "--no-save"
        ])

        assert result.exit_code == 0
        assert mock_service.remix.call_args[0][1].name == "Weekend Gamers"

    def test_remix_without_audience_data(self, runner, audiences_file, output_dir, mock_service, tmp_path):
        concept_file = tmp_path / "concept.json"
        concept_file.write_text(json.dumps({"title": "Level Up", "description": "A gaming push."}))

        result = runner.invoke(main, [
            "remix", audiences_file, "-u", "user-a", "--concept", str(concept_file), "-o", output_dir
        ])

        assert result.exit_code == 1
        assert "Unable to find audience data for remixing" in result.output
        assert mock_service.remix.call_count == 0

    @patch("uvicorn.run")
    @patch("conceptlab.server.build_default_handler")
    def test_serve(self, mock_build_handler, mock_run, runner, audiences_file):
        mock_build_handler.return_value = MagicMock()

        result = runner.invoke(main, ["serve", "--host", "0.0.0.0", "--port", "9000", "--audiences", audiences_file])

        assert result.exit_code == 0
        mock_build_handler.assert_called_once_with(audiences_file=audiences_file, log_file=None)
        assert mock_run.call_args[1] == {"host": "0.0.0.0", "port": 9000}
