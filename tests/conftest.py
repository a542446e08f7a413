"""Pytest configuration and shared fixtures for the mdtranspile test suite.

This module registers the test markers, selects the Hypothesis profile and
provides small fixtures shared across unit and integration tests.
"""

import os
from pathlib import Path

import pytest
from hypothesis import HealthCheck, Verbosity, settings

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=200, verbosity=Verbosity.verbose, deadline=None)
settings.register_profile("dev", max_examples=50, suppress_health_check=[HealthCheck.too_slow])

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests - full pipeline tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


SAMPLE_MARKDOWN = """---
title: Sample
tags: [a, b]
...

# Heading

Some *emphasis* and **strong** text with `code`.

- [x] done
- [ ] todo

```python
print("hi")
```

| Name | Qty |
|:-----|----:|
| Tea  | 2   |
"""


@pytest.fixture
def sample_markdown() -> str:
    """Markdown document touching most block and inline kinds.

    Returns
    -------
    str
        Source with Pandoc-style frontmatter, a task list, code and a table.

    """
    return SAMPLE_MARKDOWN


@pytest.fixture
def markdown_file(tmp_path: Path, sample_markdown: str) -> Path:
    """Write the sample document to a temporary file.

    Returns
    -------
    Path
        Path of the written ``.md`` file.

    """
    path = tmp_path / "sample.md"
    path.write_text(sample_markdown, encoding="utf-8")
    return path
