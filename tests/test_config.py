from kdindex.config import KdIndexConfig


def test_defaults():
    config = KdIndexConfig()
    assert config.tree_suffix == ".kdtree"
    assert config.results_suffix == ".results"
    assert config.delimiter is None
    assert config.check_brute_force


def test_from_env():
    environ = {
        "KDINDEX_TREE_SUFFIX": ".tree",
        "KDINDEX_DELIMITER": ";",
        "KDINDEX_LOG_LEVEL": "DEBUG",
        "KDINDEX_CHECK_BRUTE_FORCE": "no",
        "UNRELATED": "1",
    }
    config = KdIndexConfig.from_env(environ)
    assert config.tree_suffix == ".tree"
    assert config.results_suffix == ".results"
    assert config.delimiter == ";"
    assert config.log_level == "DEBUG"
    assert not config.check_brute_force

    assert KdIndexConfig.from_env({"KDINDEX_DELIMITER": ""}).delimiter is None
    assert KdIndexConfig.from_env({}) == KdIndexConfig()
