from pathlib import Path

from api_scout.definitions.base import DiscoveredDefinition, JobContext
from api_scout.definitions.discovery import discover
from api_scout.targets.consolidate import consolidate, get_upload_target_config

FIXTURES = Path(__file__).parent / "fixtures"
TEMPLATE = "apis/{metadata.team}/{repoId}/{title}"
JOB = JobContext(namespace_id="acme", repository_id="svc")
ROOT = Path("/repo")


def _make_definition(path: str, title: str = "API", team: str = "core") -> DiscoveredDefinition:
    return DiscoveredDefinition(path=Path(path), title=title, metadata={"team": team})


def _source_paths(targets) -> set[str]:
    return {t.source_path.as_posix() for t in targets}


class TestUploadTargetConfig:
    def test_versioned_folder(self):
        definition = _make_definition("/repo/specs/@v1/openapi.yaml")
        config = get_upload_target_config(definition, [definition], ROOT)
        assert config.path == Path("/repo/specs")
        assert config.type == "folder"
        assert config.is_versioned is True

    def test_root_versioned_folder_is_skipped(self):
        definition = _make_definition("/repo/@v1/openapi.yaml")
        assert get_upload_target_config(definition, [definition], ROOT) is None

    def test_config_file(self):
        definition = _make_definition("/repo/specs/redocly.yaml")
        siblings = [definition, _make_definition("/repo/specs/openapi.yaml")]
        config = get_upload_target_config(definition, siblings, ROOT)
        assert config.path == Path("/repo/specs")
        assert config.type == "folder"
        assert config.is_versioned is False

    def test_multi_definition_folder(self):
        cats = _make_definition("/repo/specs/cats.yaml")
        dogs = _make_definition("/repo/specs/dogs.yaml")
        config = get_upload_target_config(cats, [cats, dogs], ROOT)
        assert config.path == Path("/repo/specs/cats.yaml")
        assert config.type == "file"

    def test_single_definition_folder(self):
        cats = _make_definition("/repo/specs/cats/openapi.yaml")
        config = get_upload_target_config(cats, [cats], ROOT)
        assert config.path == Path("/repo/specs/cats")
        assert config.type == "folder"


class TestConsolidate:
    def test_versioned_apis_push_parent_folder(self):
        definitions = [
            _make_definition("/repo/specs/@v1/openapi.yaml"),
            _make_definition("/repo/specs/@v2/openapi.yaml"),
        ]
        targets = consolidate(definitions, ROOT, TEMPLATE, JOB)
        assert _source_paths(targets) == {"/repo/specs"}
        assert targets[0].is_versioned is True

    def test_root_versioned_apis_are_not_pushed(self):
        definitions = [
            _make_definition("/repo/@v1/openapi.yaml"),
            _make_definition("/repo/@v2/openapi.yaml"),
        ]
        assert consolidate(definitions, ROOT, TEMPLATE, JOB) == []

    def test_files_in_same_folder_are_pushed_individually(self):
        definitions = [
            _make_definition("/repo/specs/cats-openapi.yaml"),
            _make_definition("/repo/specs/dogs-openapi.yaml"),
        ]
        targets = consolidate(definitions, ROOT, TEMPLATE, JOB)
        assert _source_paths(targets) == {
            "/repo/specs/cats-openapi.yaml",
            "/repo/specs/dogs-openapi.yaml",
        }
        assert {t.type for t in targets} == {"file"}

    def test_single_file_folders_are_pushed_as_folders(self):
        definitions = [
            _make_definition("/repo/specs/cats/openapi.yaml"),
            _make_definition("/repo/specs/dogs/openapi.yaml"),
        ]
        targets = consolidate(definitions, ROOT, TEMPLATE, JOB)
        assert _source_paths(targets) == {"/repo/specs/cats", "/repo/specs/dogs"}

    def test_mixed_layout(self):
        definitions = [
            _make_definition("/specs/hamsters/openapi.yaml"),
            _make_definition("/specs/cats/bengal-openapi.yaml"),
            _make_definition("/specs/cats/persian-openapi.yaml"),
            _make_definition("/@v1/openapi.yaml"),
            _make_definition("/@v2/openapi.yaml"),
            _make_definition("/specs/dogs/@v1/openapi.yaml"),
            _make_definition("/specs/dogs/@v2/openapi.yaml"),
        ]
        targets = consolidate(definitions, Path("/"), TEMPLATE, JOB)
        assert _source_paths(targets) == {
            "/specs/hamsters",
            "/specs/cats/bengal-openapi.yaml",
            "/specs/cats/persian-openapi.yaml",
            "/specs/dogs",
        }

    def test_nested_targets_are_suppressed(self):
        definitions = [
            _make_definition("/repo/specs/@v1/openapi.yaml"),
            _make_definition("/repo/specs/@v2/openapi.yaml"),
            _make_definition("/repo/specs/@v2/dogs/openapi.yaml"),
        ]
        targets = consolidate(definitions, ROOT, TEMPLATE, JOB)
        assert _source_paths(targets) == {"/repo/specs"}

    def test_versioned_folder_subsumes_plain_sub_folder(self):
        definitions = [
            _make_definition("/repo/specs/cats/openapi.yaml"),
            _make_definition("/repo/specs/@v1/openapi.yaml"),
        ]
        targets = consolidate(definitions, ROOT, TEMPLATE, JOB)
        assert _source_paths(targets) == {"/repo/specs"}

    def test_similar_prefix_is_not_suppressed(self):
        definitions = [
            _make_definition("/repo/specs/openapi.yaml"),
            _make_definition("/repo/specs-old/openapi.yaml"),
        ]
        targets = consolidate(definitions, ROOT, TEMPLATE, JOB)
        assert _source_paths(targets) == {"/repo/specs", "/repo/specs-old"}

    def test_same_target_last_writer_wins(self):
        definitions = [
            _make_definition("/repo/specs/@v1/openapi.yaml", title="Pets v1"),
            _make_definition("/repo/specs/@v2/openapi.yaml", title="Pets v2"),
        ]
        [target] = consolidate(definitions, ROOT, TEMPLATE, JOB)
        assert target.title == "Pets v2"
        assert target.target_path == "Pets v2"
        assert target.remote_mount_path == "apis/core/svc"

    def test_destination_fields(self):
        definitions = [_make_definition("/repo/specs/cats/openapi.yaml", title="Cats", team="felines")]
        [target] = consolidate(definitions, ROOT, TEMPLATE, JOB)
        assert target.remote_mount_path == "apis/felines/svc"
        assert target.target_path == "Cats/@latest"
        assert target.metadata == {"team": "felines"}

    def test_output_is_an_antichain(self):
        definitions = [
            _make_definition("/repo/a/@v1/openapi.yaml"),
            _make_definition("/repo/a/b/openapi.yaml"),
            _make_definition("/repo/a/b/c/openapi.yaml"),
            _make_definition("/repo/a/b/c/other.yaml"),
            _make_definition("/repo/x/redocly.yaml"),
            _make_definition("/repo/x/y/openapi.yaml"),
        ]
        targets = consolidate(definitions, ROOT, TEMPLATE, JOB)
        paths = [t.source_path for t in targets]
        assert len(paths) == len(set(paths))
        for path in paths:
            assert not any(other != path and other in path.parents for other in paths)
        assert _source_paths(targets) == {"/repo/a", "/repo/x"}


class TestScenarios:
    def test_versioned_petstore_and_plain_siblings(self, tmp_path):
        metadata = "  x-metadata:\n    team: pets\n"
        for rel, title in (
            ("apis/@v1/petstore.yaml", "Petstore"),
            ("apis/@v2/petstore.yaml", "Petstore"),
            ("other/cats/cats.yaml", "Cats"),
            ("other/dogs/dogs.yaml", "Dogs"),
        ):
            f = tmp_path / rel
            f.parent.mkdir(parents=True, exist_ok=True)
            f.write_text(f"openapi: 3.0.0\ninfo:\n  title: {title}\n{metadata}")

        result = discover(tmp_path)
        targets = consolidate(result.definitions, tmp_path, TEMPLATE, JOB)
        by_path = {t.source_path.relative_to(tmp_path).as_posix(): t for t in targets}

        assert set(by_path) == {"apis", "other/cats", "other/dogs"}
        assert by_path["apis"].is_versioned is True
        assert by_path["other/cats"].type == "folder"
        assert by_path["other/dogs"].type == "folder"

    def test_config_only_folder(self, tmp_path):
        folder = tmp_path / "payments"
        folder.mkdir()
        (folder / "redocly.yaml").write_text("metadata:\n  team: payments\n")

        result = discover(tmp_path)
        targets = consolidate(result.definitions, tmp_path, TEMPLATE, JOB)

        assert len(result.definitions) == 1
        assert len(targets) == 1
        assert targets[0].source_path == folder
        assert targets[0].type == "folder"
        assert targets[0].target_path == "payments/@latest"

    def test_fixture_repo(self):
        root = FIXTURES / "repo"
        result = discover(root, "apis")
        targets = consolidate(result.definitions, root, TEMPLATE, JOB)
        by_path = {t.source_path.relative_to(root / "apis").as_posix(): t for t in targets}

        assert set(by_path) == {
            "billing",
            "cats",
            "dogs",
            "pets",
            "zoo/bengal.yaml",
            "zoo/persian.yaml",
        }
        assert by_path["billing"].title == "billing"
        assert by_path["billing"].remote_mount_path == "apis/billing/svc"
        assert by_path["pets"].is_versioned is True
        assert by_path["pets"].target_path == "Petstore v2 API"
        assert by_path["zoo/bengal.yaml"].type == "file"


class TestCheckoutPathWithVersionMarker:
    def test_marker_in_checkout_location_is_ignored(self, tmp_path):
        root = tmp_path / "ws@2"
        for name in ("cats", "dogs"):
            f = root / "apis" / name / "openapi.yaml"
            f.parent.mkdir(parents=True)
            f.write_text(f"openapi: 3.0.0\ninfo:\n  title: {name}\n  x-metadata:\n    team: {name}\n")

        result = discover(root)
        targets = consolidate(result.definitions, root, TEMPLATE, JOB)

        assert {t.source_path for t in targets} == {root / "apis" / "cats", root / "apis" / "dogs"}
        assert not any(t.is_versioned for t in targets)

    def test_versions_inside_checkout_with_marker(self):
        root = Path("/ci/ws@2")
        definitions = [
            _make_definition("/ci/ws@2/specs/@v1/openapi.yaml"),
            _make_definition("/ci/ws@2/specs/@v2/openapi.yaml"),
        ]
        [target] = consolidate(definitions, root, TEMPLATE, JOB)
        assert target.source_path == Path("/ci/ws@2/specs")
        assert target.is_versioned is True

    def test_root_versions_in_checkout_with_marker_are_skipped(self):
        root = Path("/ci/ws@2")
        definitions = [_make_definition("/ci/ws@2/@v1/openapi.yaml")]
        assert consolidate(definitions, root, TEMPLATE, JOB) == []
