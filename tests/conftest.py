"""Shared fixtures: isolate tests from the caller's environment and logging."""

import logging

import pytest

from vkshadersgen.config import FEATURE_ENV_VARS, FEATURES_FILE_ENV_VAR


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for env_var in list(FEATURE_ENV_VARS.values()) + [FEATURES_FILE_ENV_VAR, "VKSHADERS_LOG_FILE", "VERBOSE", "QUIET"]:
        monkeypatch.delenv(env_var, raising=False)
    yield
    logger = logging.getLogger('vkshadersgen')
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
