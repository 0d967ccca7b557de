"""Framework detection table and project profile.

A project first gets a primary stack from the first STACK_MARKERS group it
has, so a repo with a package.json is a Node project even if it also holds
a requirements.txt. FRAMEWORK_RULES for that stack are then evaluated top
to bottom and the first matching predicate wins, so table order is the only
tie-break between frameworks that could both match (e.g. a NestJS app that
also depends on express).
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from skillbudget.detection.signatures import ProjectSignatures

NEXT_CONFIGS = ("next.config.js", "next.config.mjs", "next.config.ts")
NUXT_CONFIGS = ("nuxt.config.js", "nuxt.config.ts")

Stack = Literal["node", "python", "jvm", "php", "go", "ruby", "rust"]

# Checked in order; the first group with a present marker decides the stack
STACK_MARKERS: tuple[tuple[Stack, tuple[str, ...]], ...] = (
    ("node", ("nest-cli.json", "package.json")),
    ("python", ("manage.py", "requirements.txt", "pyproject.toml")),
    ("jvm", ("pom.xml", "build.gradle", "build.gradle.kts")),
    ("php", ("composer.json",)),
    ("go", ("go.mod",)),
    ("ruby", ("Gemfile",)),
    ("rust", ("Cargo.toml",)),
)


@dataclass(frozen=True)
class FrameworkRule:
    framework_id: str
    display_name: str
    language: str
    stack: Stack
    predicate: Callable[[ProjectSignatures], bool]


def _has_any(sig: ProjectSignatures, markers: tuple[str, ...]) -> bool:
    return any(sig.has(m) for m in markers)


def _is_nestjs(sig: ProjectSignatures) -> bool:
    return sig.has("nest-cli.json") or "@nestjs/core" in sig.node_dependencies()


def _is_nextjs(sig: ProjectSignatures) -> bool:
    return "next" in sig.node_dependencies() or _has_any(sig, NEXT_CONFIGS)


def _is_nuxt(sig: ProjectSignatures) -> bool:
    return "nuxt" in sig.node_dependencies() or _has_any(sig, NUXT_CONFIGS)


def _is_vue(sig: ProjectSignatures) -> bool:
    return "vue" in sig.node_dependencies()


def _is_express(sig: ProjectSignatures) -> bool:
    return "express" in sig.node_dependencies()


def _is_fastify(sig: ProjectSignatures) -> bool:
    return "fastify" in sig.node_dependencies()


def _is_managed_django(sig: ProjectSignatures) -> bool:
    if not sig.has("manage.py"):
        return False
    return "django" in sig.python_requirements() or "django" in sig.text("manage.py").lower()


def _is_fastapi(sig: ProjectSignatures) -> bool:
    return "fastapi" in sig.python_requirements()


def _is_flask(sig: ProjectSignatures) -> bool:
    return "flask" in sig.python_requirements()


def _is_django(sig: ProjectSignatures) -> bool:
    # manage.py without recognizable dependencies is still a Django project
    return sig.has("manage.py") or "django" in sig.python_requirements()


def _is_spring_boot(sig: ProjectSignatures) -> bool:
    build_files = sig.text("pom.xml") + sig.text("build.gradle") + sig.text("build.gradle.kts")
    return "spring-boot" in build_files


def _is_laravel(sig: ProjectSignatures) -> bool:
    return "laravel/framework" in sig.composer_dependencies()


def _is_go(sig: ProjectSignatures) -> bool:
    return sig.has("go.mod")


def _is_rails(sig: ProjectSignatures) -> bool:
    return "rails" in sig.text("Gemfile")


def _is_rust(sig: ProjectSignatures) -> bool:
    return sig.has("Cargo.toml")


FRAMEWORK_RULES: tuple[FrameworkRule, ...] = (
    FrameworkRule("nestjs", "NestJS", "TypeScript", "node", _is_nestjs),
    FrameworkRule("nextjs", "Next.js", "JavaScript", "node", _is_nextjs),
    FrameworkRule("nuxt", "Nuxt.js", "JavaScript", "node", _is_nuxt),
    FrameworkRule("vue", "Vue.js", "JavaScript", "node", _is_vue),
    FrameworkRule("express", "Express", "JavaScript", "node", _is_express),
    FrameworkRule("fastify", "Fastify", "JavaScript", "node", _is_fastify),
    FrameworkRule("django", "Django", "Python", "python", _is_managed_django),
    FrameworkRule("fastapi", "FastAPI", "Python", "python", _is_fastapi),
    FrameworkRule("flask", "Flask", "Python", "python", _is_flask),
    FrameworkRule("django", "Django", "Python", "python", _is_django),
    FrameworkRule("spring-boot", "Spring Boot", "Java", "jvm", _is_spring_boot),
    FrameworkRule("laravel", "Laravel", "PHP", "php", _is_laravel),
    FrameworkRule("go", "Go", "Go", "go", _is_go),
    FrameworkRule("rails", "Ruby on Rails", "Ruby", "ruby", _is_rails),
    FrameworkRule("rust", "Rust", "Rust", "rust", _is_rust),
)


def primary_stack(signatures: ProjectSignatures) -> Stack | None:
    """Return the stack of the first marker group present, if any."""
    for stack, markers in STACK_MARKERS:
        if _has_any(signatures, markers):
            return stack
    return None


def match_framework_rule(signatures: ProjectSignatures) -> FrameworkRule | None:
    """Return the first rule of the project's primary stack whose predicate matches.

    Raises:
        MalformedSignatureError: If a predicate needs a manifest that cannot be parsed
    """
    stack = primary_stack(signatures)
    for rule in FRAMEWORK_RULES:
        if rule.stack == stack and rule.predicate(signatures):
            return rule
    return None


def framework_display_name(framework_id: str) -> str:
    for rule in FRAMEWORK_RULES:
        if rule.framework_id == framework_id:
            return rule.display_name
    return framework_id


# Placeholders used in generated rule files when a property is unknown
UNKNOWN_FRAMEWORK = (
    "[NestJS / Next.js / Express / Django / FastAPI / Spring Boot / Laravel / Go / Rust]"
)
UNKNOWN_LANGUAGE = "[TypeScript / JavaScript / Python / Java / Kotlin / PHP / Go / Ruby / Rust]"
UNKNOWN_ORM = (
    "[Prisma / TypeORM / Sequelize / Drizzle / Mongoose / SQLAlchemy / Django ORM"
    " / Spring Data / Eloquent]"
)
UNKNOWN_PACKAGE_MANAGER = (
    "[npm / yarn / bun / pnpm / pip / poetry / maven / gradle / composer / go mod"
    " / bundler / cargo]"
)

NODE_ORMS: tuple[tuple[str, str], ...] = (
    ("@prisma/client", "Prisma"),
    ("typeorm", "TypeORM"),
    ("sequelize", "Sequelize"),
    ("drizzle-orm", "Drizzle"),
    ("mongoose", "Mongoose"),
)

NODE_LOCKFILES: tuple[tuple[str, str], ...] = (
    ("bun.lockb", "bun"),
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("package-lock.json", "npm"),
)

GRAPHQL_PACKAGES = frozenset({"@nestjs/graphql", "apollo-server", "@apollo/server"})

GRPC_SCAN_MARKERS = (
    "package.json",
    "requirements.txt",
    "pyproject.toml",
    "pom.xml",
    "build.gradle",
    "build.gradle.kts",
    "go.mod",
    "Cargo.toml",
)


@dataclass(frozen=True)
class ProjectProfile:
    """Human-readable description of a project, used to head rule files."""

    framework: str
    language: str
    orm: str
    api_style: str
    package_manager: str

    @staticmethod
    def unknown() -> "ProjectProfile":
        return ProjectProfile(
            framework=UNKNOWN_FRAMEWORK,
            language=UNKNOWN_LANGUAGE,
            orm=UNKNOWN_ORM,
            api_style="REST",
            package_manager=UNKNOWN_PACKAGE_MANAGER,
        )


def _node_language(sig: ProjectSignatures, deps: frozenset[str]) -> str:
    if "typescript" in deps or sig.has("tsconfig.json"):
        return "TypeScript"
    return "JavaScript"


def _profile_node(sig: ProjectSignatures, framework: str) -> ProjectProfile:
    deps = sig.node_dependencies()
    orm = next((name for pkg, name in NODE_ORMS if pkg in deps), UNKNOWN_ORM)
    package_manager = next(
        (name for lockfile, name in NODE_LOCKFILES if sig.has(lockfile)), UNKNOWN_PACKAGE_MANAGER
    )
    return ProjectProfile(
        framework=framework,
        language="TypeScript" if framework == "NestJS" else _node_language(sig, deps),
        orm=orm,
        api_style="GraphQL" if deps & GRAPHQL_PACKAGES else "REST",
        package_manager=package_manager,
    )


def _profile_python(sig: ProjectSignatures, framework: str) -> ProjectProfile:
    requirements = sig.python_requirements()
    if "sqlalchemy" in requirements:
        orm = "SQLAlchemy"
    elif framework == "Django":
        orm = "Django ORM"
    else:
        orm = UNKNOWN_ORM

    if sig.has("poetry.lock"):
        package_manager = "poetry"
    elif sig.has("requirements.txt") or sig.has("pyproject.toml"):
        package_manager = "pip"
    else:
        package_manager = UNKNOWN_PACKAGE_MANAGER

    return ProjectProfile(
        framework=framework,
        language="Python",
        orm=orm,
        api_style="REST",
        package_manager=package_manager,
    )


def _profile_jvm(sig: ProjectSignatures, framework: str) -> ProjectProfile:
    build_text = sig.text("pom.xml") + sig.text("build.gradle") + sig.text("build.gradle.kts")
    if sig.has("pom.xml"):
        package_manager = "maven"
    else:
        package_manager = "gradle"
    return ProjectProfile(
        framework=framework,
        language="Kotlin" if sig.has("build.gradle.kts") else "Java",
        orm="Spring Data" if "spring-data-jpa" in build_text else UNKNOWN_ORM,
        api_style="REST",
        package_manager=package_manager,
    )


def _profile_generic(sig: ProjectSignatures) -> ProjectProfile:
    """Profile for projects that no framework rule recognizes."""
    if sig.has("package.json"):
        return _profile_node(sig, UNKNOWN_FRAMEWORK)
    if sig.has("requirements.txt") or sig.has("pyproject.toml"):
        return _profile_python(sig, "Python")
    if sig.has("pom.xml"):
        return _profile_jvm(sig, "Java (Maven)")
    if sig.has("build.gradle.kts"):
        return _profile_jvm(sig, "Kotlin (Gradle)")
    if sig.has("build.gradle"):
        return _profile_jvm(sig, "Java (Gradle)")
    if sig.has("composer.json"):
        return ProjectProfile(
            framework="PHP",
            language="PHP",
            orm=UNKNOWN_ORM,
            api_style="REST",
            package_manager="composer",
        )
    if sig.has("Gemfile"):
        return ProjectProfile(
            framework="Ruby",
            language="Ruby",
            orm=UNKNOWN_ORM,
            api_style="REST",
            package_manager="bundler",
        )
    return ProjectProfile.unknown()


def _with_grpc(sig: ProjectSignatures, profile: ProjectProfile) -> ProjectProfile:
    if profile.api_style != "REST":
        return profile
    for marker in GRPC_SCAN_MARKERS:
        content = sig.text(marker)
        if ".proto" in content or "grpc" in content:
            return ProjectProfile(
                framework=profile.framework,
                language=profile.language,
                orm=profile.orm,
                api_style="gRPC",
                package_manager=profile.package_manager,
            )
    return profile


def profile_project(signatures: ProjectSignatures, rule: FrameworkRule | None) -> ProjectProfile:
    """Describe the project's stack for generated rule files.

    Args:
        signatures: Project signatures
        rule: The framework rule that matched, or None

    Raises:
        MalformedSignatureError: If a manifest needed for profiling cannot be parsed
    """
    if rule is None:
        return _with_grpc(signatures, _profile_generic(signatures))

    if rule.language in ("TypeScript", "JavaScript"):
        profile = _profile_node(signatures, rule.display_name)
    elif rule.language == "Python":
        profile = _profile_python(signatures, rule.display_name)
    elif rule.language == "Java":
        profile = _profile_jvm(signatures, rule.display_name)
    elif rule.framework_id == "laravel":
        profile = ProjectProfile(
            framework=rule.display_name,
            language="PHP",
            orm="Eloquent",
            api_style="REST",
            package_manager="composer",
        )
    else:
        package_managers = {"go": "go mod", "rails": "bundler", "rust": "cargo"}
        profile = ProjectProfile(
            framework=rule.display_name,
            language=rule.language,
            orm=UNKNOWN_ORM,
            api_style="REST",
            package_manager=package_managers.get(rule.framework_id, UNKNOWN_PACKAGE_MANAGER),
        )
    return _with_grpc(signatures, profile)
