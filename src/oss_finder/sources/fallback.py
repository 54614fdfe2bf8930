"""GitHub API를 쓸 수 없을 때 보여줄 데모 프로젝트 목록."""

from datetime import UTC, datetime

from oss_finder.models import Project


def _project(
    repo_id: int,
    full_name: str,
    description: str,
    language: str,
    topics: list[str],
    stars: int,
    forks: int,
    open_issues: int,
    created: str,
    updated: str,
    license_spdx: str | None = "MIT",
    license_name: str | None = "MIT License",
) -> Project:
    return Project(
        id=repo_id,
        name=full_name.split("/")[-1],
        full_name=full_name,
        description=description,
        language=language,
        topics=topics,
        stars=stars,
        forks=forks,
        open_issues=open_issues,
        created_at=datetime.fromisoformat(created).replace(tzinfo=UTC),
        updated_at=datetime.fromisoformat(updated).replace(tzinfo=UTC),
        license=license_name,
        license_spdx=license_spdx,
        html_url=f"https://github.com/{full_name}",
    )


FALLBACK_PROJECTS: list[Project] = [
    _project(
        10270250,
        "facebook/react",
        "The library for web and native user interfaces.",
        "JavaScript",
        ["react", "javascript", "frontend", "ui", "declarative", "library"],
        228000,
        46600,
        980,
        "2013-05-24",
        "2024-06-01",
    ),
    _project(
        11730342,
        "vuejs/vue",
        "This is the repo for Vue 2. For Vue 3, go to https://github.com/vuejs/core",
        "TypeScript",
        ["vue", "javascript", "frontend", "framework"],
        207000,
        33700,
        580,
        "2013-07-29",
        "2024-05-20",
    ),
    _project(
        4164482,
        "django/django",
        "The Web framework for perfectionists with deadlines.",
        "Python",
        ["django", "python", "web", "framework", "orm"],
        78000,
        31500,
        320,
        "2012-04-28",
        "2024-06-02",
        license_spdx="BSD-3-Clause",
        license_name='BSD 3-Clause "New" or "Revised" License',
    ),
    _project(
        1362490,
        "pallets/flask",
        "The Python micro framework for building web applications.",
        "Python",
        ["flask", "python", "web", "wsgi", "beginner-friendly"],
        66500,
        16200,
        8,
        "2010-04-06",
        "2024-05-28",
        license_spdx="BSD-3-Clause",
        license_name='BSD 3-Clause "New" or "Revised" License',
    ),
    _project(
        724712,
        "rust-lang/rust",
        "Empowering everyone to build reliable and efficient software.",
        "Rust",
        ["rust", "compiler", "language"],
        94000,
        12100,
        9800,
        "2010-06-16",
        "2024-06-02",
        license_spdx="NOASSERTION",
        license_name="Other",
    ),
    _project(
        65600975,
        "pytorch/pytorch",
        "Tensors and Dynamic neural networks in Python with strong GPU acceleration",
        "Python",
        ["pytorch", "deep-learning", "machine-learning", "python", "neural-networks"],
        79000,
        21200,
        12500,
        "2016-08-13",
        "2024-06-02",
        license_spdx="NOASSERTION",
        license_name="Other",
    ),
    _project(
        60246359,
        "kubernetes/kubernetes",
        "Production-Grade Container Scheduling and Management",
        "Go",
        ["kubernetes", "devops", "containers", "go", "cncf"],
        108000,
        39000,
        2400,
        "2014-06-06",
        "2024-06-02",
        license_spdx="Apache-2.0",
        license_name="Apache License 2.0",
    ),
    _project(
        44838949,
        "flutter/flutter",
        "Flutter makes it easy and fast to build beautiful apps for mobile and beyond",
        "Dart",
        ["flutter", "mobile", "android", "ios", "app-framework"],
        163000,
        26900,
        12700,
        "2015-03-06",
        "2024-06-01",
        license_spdx="BSD-3-Clause",
        license_name='BSD 3-Clause "New" or "Revised" License',
    ),
    _project(
        21737465,
        "freeCodeCamp/freeCodeCamp",
        "freeCodeCamp.org's open-source codebase and curriculum. Learn to code for free.",
        "TypeScript",
        ["education", "learning", "tutorial", "good-first-issue", "hacktoberfest"],
        395000,
        36000,
        220,
        "2014-12-24",
        "2024-06-02",
        license_spdx="BSD-3-Clause",
        license_name='BSD 3-Clause "New" or "Revised" License',
    ),
    _project(
        13491895,
        "godotengine/godot",
        "Godot Engine - Multi-platform 2D and 3D game engine",
        "C++",
        ["godot", "game-engine", "game-development", "gamedev", "c++"],
        86000,
        19500,
        10800,
        "2014-01-04",
        "2024-06-02",
    ),
    _project(
        70107786,
        "vercel/next.js",
        "The React Framework",
        "JavaScript",
        ["react", "nextjs", "web", "frontend", "server-rendering"],
        122000,
        26100,
        2700,
        "2016-10-05",
        "2024-06-02",
    ),
    _project(
        137078487,
        "tailwindlabs/tailwindcss",
        "A utility-first CSS framework for rapid UI development.",
        "TypeScript",
        ["tailwind", "css", "ui", "frontend"],
        78000,
        3900,
        90,
        "2017-07-23",
        "2024-05-30",
    ),
]
