from dockrel.PARSERS.config_parser import ConfigParser
from dockrel.MODELS.docker_config import DockerConfig, ReleaseConfig
from dockrel.UTILS.string_interpolation import EnvironmentInterpolator
from dockrel.exceptions import ConfigError
import pytest


def test_parse_from_string():
    content = """
    name: myapp
    version: 0.1.0
    docker: true
    dockerfile:
      image: alpine
      version: "3.18"
      maintainer: ops@example.com
      entrypoint_args: [foreground]
    """
    release = ConfigParser(context={}).parse_from_string(content)
    assert release.name == "myapp"
    assert release.docker is True
    assert release.dockerfile.image == "alpine"
    assert release.dockerfile.version == "3.18"
    assert release.dockerfile.entrypoint_args == ["foreground"]
    assert release.dockerfile.copy_rel == "COPY rel /rel"
    assert release.image_tag == "myapp:0.1.0"


def test_defaults():
    release = ConfigParser(context={}).parse_from_string("name: myapp")
    assert release.docker is False
    assert release.build_tool == "docker"
    assert release.dockerfile == DockerConfig()
    assert release.image_tag == "myapp"


def test_empty_dockerfile_section():
    release = ConfigParser(context={}).parse_from_string("name: myapp\ndockerfile:\n")
    assert release.dockerfile.image == "centos"


def test_numeric_versions_become_strings():
    release = ConfigParser(context={}).parse_from_string("name: myapp\nversion: 2\ndockerfile:\n  version: 18\n")
    assert release.version == "2"
    assert release.dockerfile.version == "18"


def test_float_version_must_be_quoted():
    with pytest.raises(ConfigError, match="quote it"):
        ConfigParser(context={}).parse_from_string("name: myapp\ndockerfile:\n  image: python\n  version: 3.10\n")


def test_float_release_version_must_be_quoted():
    with pytest.raises(ConfigError, match="quote it"):
        ConfigParser(context={}).parse_from_string("name: myapp\nversion: 1.10\n")


def test_quoted_float_version_kept():
    release = ConfigParser(context={}).parse_from_string("name: myapp\ndockerfile:\n  version: '3.10'\n")
    assert release.dockerfile.version == "3.10"


def test_comments_are_not_interpolated():
    content = """
    # set ${IMAGE} to override the base image
    name: myapp
    dockerfile:
      image: alpine  # or ${OTHER_IMAGE}
    """
    release = ConfigParser(context={}).parse_from_string(content)
    assert release.dockerfile.image == "alpine"


def test_literal_empty_string_kept():
    release = ConfigParser(context={}).parse_from_string("name: myapp\ndockerfile:\n  pre_copy: ''\n")
    assert release.dockerfile.pre_copy == ""


def test_explicit_tag_wins():
    release = ReleaseConfig(name="myapp", version="1.0", tag="registry.local/myapp:edge")
    assert release.image_tag == "registry.local/myapp:edge"


def test_interpolation():
    content = """
    name: myapp
    dockerfile:
      image: ${BASE_IMAGE:-centos}
      version: "${BASE_VERSION}"
      maintainer: ${MAINTAINER:+MAINTAINER ops}
    """
    release = ConfigParser(context={"BASE_VERSION": "7"}).parse_from_string(content)
    assert release.dockerfile.image == "centos"
    assert release.dockerfile.version == "7"
    assert release.dockerfile.maintainer is None


def test_unset_variable():
    with pytest.raises(ConfigError, match="BASE_VERSION"):
        ConfigParser(context={}).parse_from_string("name: ${BASE_VERSION}")


def test_unknown_option_rejected():
    with pytest.raises(ConfigError):
        ConfigParser(context={}).parse_from_string("name: myapp\ndockerfile:\n  imgae: alpine\n")


def test_missing_name():
    with pytest.raises(ConfigError):
        ConfigParser(context={}).parse_from_string("docker: true")


def test_not_a_mapping():
    with pytest.raises(ConfigError):
        ConfigParser(context={}).parse_from_string("- a\n- b\n")


def test_invalid_yaml():
    with pytest.raises(ConfigError):
        ConfigParser(context={}).parse_from_string("name: [unclosed")


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        ConfigParser().parse(str(tmp_path / "dockrel.yml"))


def test_dotenv_file(tmp_path, monkeypatch):
    monkeypatch.delenv("DOCKREL_TEST_IMAGE", raising=False)
    monkeypatch.setenv("DOCKREL_TEST_VERSION", "from-environment")
    (tmp_path / ".env").write_text("DOCKREL_TEST_IMAGE=alpine\nDOCKREL_TEST_VERSION=from-dotenv\n")
    config_file = tmp_path / "dockrel.yml"
    config_file.write_text(
        "name: myapp\n"
        "dockerfile:\n"
        "  image: ${DOCKREL_TEST_IMAGE}\n"
        "  version: ${DOCKREL_TEST_VERSION}\n"
    )
    release = ConfigParser().parse(str(config_file))
    assert release.dockerfile.image == "alpine"
    assert release.dockerfile.version == "from-environment"


def test_interpolator_leaves_plain_text():
    assert EnvironmentInterpolator.interpolate("COPY rel /rel $HOME", {}) == "COPY rel /rel $HOME"
