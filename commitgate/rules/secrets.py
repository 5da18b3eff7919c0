"""Credentials and key material in the staged diff and staged paths."""

from __future__ import annotations

from commitgate.severity import Severity

from . import PathFilter, Scope, define

DIFF = Scope.DIFF_ADDED_LINE
PATH = Scope.FILE_PATH

ENV_HINT = "Use environment variables, e.g. process.env.NEXT_PUBLIC_* or a server-side secret store"

RULES = (
    define(
        "secrets.aws-credentials",
        r"AKIA[0-9A-Z]{16}|aws_access_key_id|aws_secret_access_key",
        "Possible AWS credentials detected",
        severity=Severity.CRITICAL,
        scope=DIFF,
        category="secrets",
        owasp="A02:2021",
        hint="Use environment variables for AWS keys",
        unless=r"import\.meta\.env|process\.env|//|\*|example",
    ),
    define(
        "secrets.private-key",
        r"BEGIN (?:RSA|DSA|EC|OPENSSH|PGP) PRIVATE KEY",
        "Private key detected",
        severity=Severity.CRITICAL,
        scope=DIFF,
        category="secrets",
        owasp="A02:2021",
        hint="Never commit private keys to version control",
    ),
    define(
        "secrets.hardcoded-api-key",
        r"""(?i)(?:api[_-]?key|secret|password|token|access[_-]?key)["']?\s*[:=]\s*["'][a-zA-Z0-9_\-+/]{16,}["']""",
        "Possible hardcoded API keys/secrets detected ({count} occurrence(s))",
        severity=Severity.CRITICAL,
        scope=DIFF,
        category="secrets",
        owasp="A02:2021",
        hint=ENV_HINT,
        unless=(
            r"import\.meta\.env|process\.env|VITE_|Deno\.env|\.find.*\.name\s*===|//|\*"
            r"|example|placeholder|your_|xxx|test"
        ),
        count_occurrences=True,
    ),
    define(
        "secrets.jwt",
        r"eyJ[a-zA-Z0-9_-]*\.eyJ[a-zA-Z0-9_-]*\.",
        "JWT token detected",
        severity=Severity.CRITICAL,
        scope=DIFF,
        category="secrets",
        owasp="A02:2021",
        hint="Never commit JWT tokens",
        unless=r"//|\*|example",
    ),
    define(
        "secrets.slack-token",
        r"xox[baprs]-[0-9a-zA-Z-]+",
        "Slack token detected",
        severity=Severity.CRITICAL,
        scope=DIFF,
        category="secrets",
        owasp="A02:2021",
        unless=r"//|\*|example",
    ),
    define(
        "secrets.stripe-key",
        r"(?:sk|pk)_(?:test|live)_[0-9a-zA-Z]{24,}",
        "Stripe API key detected",
        severity=Severity.CRITICAL,
        scope=DIFF,
        category="secrets",
        owasp="A02:2021",
        unless=r"//|\*|example",
    ),
    define(
        "secrets.database-url",
        r"(?:postgres|mysql|mongodb)://[^:\s]+:[^@\s]+@",
        "Database URL with credentials detected",
        severity=Severity.MEDIUM,
        scope=DIFF,
        category="secrets",
        owasp="A02:2021",
        hint="Consider using connection strings from environment variables",
        unless=r"//|\*|example|localhost",
    ),
    define(
        "files.env-file",
        r"(?:^|/)\.env(?:\.[\w.-]+)?$",
        "Attempting to commit .env file",
        severity=Severity.HIGH,
        scope=PATH,
        category="sensitive-files",
        owasp="A05:2021",
        hint="Fix: git reset HEAD .env && echo '.env*' >> .gitignore",
        unless=r"\.(?:example|sample|template)$",
    ),
    define(
        "files.node-modules",
        r"(?:^|/)node_modules/",
        "Attempting to commit node_modules/",
        severity=Severity.HIGH,
        scope=PATH,
        category="sensitive-files",
        hint="node_modules should be in .gitignore",
    ),
    define(
        "files.key-material",
        r"(?:credentials|secrets)\.json$|private\.key$|\.(?:pem|p12|pfx)$",
        "Attempting to commit a potential secret file",
        severity=Severity.HIGH,
        scope=PATH,
        category="sensitive-files",
        owasp="A02:2021",
    ),
    define(
        "files.lock-file",
        r"(?:^|/)(?:package-lock\.json|yarn\.lock|pnpm-lock\.yaml)$",
        "Lock file modified - verify dependency changes are intentional",
        severity=Severity.LOW,
        scope=PATH,
        category="supply-chain",
        owasp="A06:2021",
        applies_to=PathFilter(suffixes=("package-lock.json", "yarn.lock", "pnpm-lock.yaml")),
    ),
)
