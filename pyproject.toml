[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chatplugins"
version = "0.1.0"
description = "Game, record-keeping and lookup logic for group chat bots: sign-in scores, sleep tracking, wordle, tarot, hot words, quiz lookups and picture sets."
requires-python = ">=3.10"
keywords = ["chat", "bot", "wordle", "tarot", "sign-in", "sqlite"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Natural Language :: Chinese (Simplified)",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "requests",
    "lxml",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["chatplugins"]

[tool.pytest.ini_options]
addopts = "-ra"
