from cloudrun_kit.config import DeployConfig
from cloudrun_kit import gcp_artifact_registry as ar


def _cfg(**overrides) -> DeployConfig:
    values = dict(
        project="test-project",
        region="us-central1",
        repo="apps",
        app_name="svc",
        image_tag="v1",
        service_account_name="deployer",
    )
    values.update(overrides)
    return DeployConfig(**values)


def test_image_uri_is_composed_from_config() -> None:
    cfg = _cfg(project="p", region="r", repo="repo1", app_name="svc", image_tag="v1")

    assert ar.image_uri(cfg) == "r-docker.pkg.dev/p/repo1/svc:v1"


def test_repository_lookup_requires_exact_name(fake_gcloud) -> None:
    # "apps-old" 는 "apps" 와 다른 리포지토리이다.
    fake_gcloud.repositories.add("apps-old")

    assert not ar.repository_exists(_cfg())

    fake_gcloud.repositories.add("apps")
    assert ar.repository_exists(_cfg())


def test_ensure_repository_creates_docker_repo_when_absent(fake_gcloud) -> None:
    created = ar.ensure_repository(_cfg())

    assert created
    (create,) = fake_gcloud.matching("gcloud", "artifacts", "repositories", "create")
    assert create[4] == "apps"
    assert "--repository-format=docker" in create
    assert "--location=us-central1" in create
    assert "--description=Docker repo for svc" in create


def test_ensure_repository_is_noop_when_present(fake_gcloud) -> None:
    fake_gcloud.repositories.add("apps")

    assert not ar.ensure_repository(_cfg())
    assert fake_gcloud.creation_calls() == []


def test_submit_build_uses_working_directory_as_context(fake_gcloud, tmp_path) -> None:
    image = ar.submit_build(_cfg(), base_dir=str(tmp_path))

    assert image == "us-central1-docker.pkg.dev/test-project/apps/svc:v1"
    assert fake_gcloud.calls == [["gcloud", "builds", "submit", "--tag", image]]
    assert fake_gcloud.kwargs[0]["cwd"] == str(tmp_path)
