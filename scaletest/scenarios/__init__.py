"""Scenario configuration templates and their registries."""