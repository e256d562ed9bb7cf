import yaml

from scaletest.scenarios.apiintensive import (
    CONFIG_TEMPLATE,
    DEFAULT_JOB_ITERATIONS,
    ApiIntensiveConfig,
    new_api_intensive_config,
)
from scaletest.templating import render_template


def _jobs(cfg):
    doc = yaml.safe_load(render_template(cfg.get_template(), cfg))
    return {job["name"]: job for job in doc["jobs"]}


def test_default_job_iterations():
    assert new_api_intensive_config().job_iterations == 700
    assert DEFAULT_JOB_ITERATIONS == new_api_intensive_config().job_iterations


def test_get_template_returns_module_template():
    assert ApiIntensiveConfig().get_template() == CONFIG_TEMPLATE


def test_first_job_uses_job_iterations():
    jobs = _jobs(ApiIntensiveConfig(job_iterations=42))
    assert jobs["api-intensive"]["jobIterations"] == 42


def test_patch_job_iterations_are_fixed():
    first = _jobs(ApiIntensiveConfig(job_iterations=3))
    second = _jobs(ApiIntensiveConfig(job_iterations=9))
    assert first["api-intensive-patch"]["jobIterations"] == second["api-intensive-patch"]["jobIterations"]


def test_job_order_and_label_selectors():
    jobs = _jobs(new_api_intensive_config())
    assert list(jobs) == [
        "api-intensive",
        "api-intensive-patch",
        "api-intensive-remove",
        "ensure-pods-removal",
        "remove-services",
        "remove-configmaps-secrets",
    ]
    selectors = {obj["labelSelector"]["kube-burner-job"] for obj in jobs["remove-configmaps-secrets"]["objects"]}
    assert selectors == {"api-intensive"}