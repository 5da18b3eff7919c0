"""OWASP Top 10 oriented rules for JavaScript/TypeScript web code."""

from __future__ import annotations

import re

from commitgate.severity import Severity

from . import ALWAYS, PathFilter, Scope, define

DIFF = Scope.DIFF_ADDED_LINE

COMPONENTS = PathFilter(suffixes=(".tsx", ".jsx"))
MARKUP = PathFilter(suffixes=(".tsx", ".jsx", ".html"))
SERVER_ENTRYPOINTS = PathFilter(contains=("/api/", "/actions/", "route.ts"))
SERVER_CODE = PathFilter(contains=("/api/", "/actions/"))
SERVER_ACTIONS = PathFilter(contains=("/actions/",))
API_ROUTES = PathFilter(suffixes=("route.ts",), contains=("/api/",))
NEXT_CONFIG = PathFilter(contains=("next.config",))
VERCEL_CONFIG = PathFilter(contains=("vercel.json",))
PACKAGE_MANIFEST = PathFilter(suffixes=("package.json",))

USE_SERVER = r"""['"]use server['"]"""
USER_INPUT = r"(?:req|params|query|body)"
MUTATION_CALL = r"\.(?:insert|update|delete|upsert)\("
AUTH_CHECK = r"getUser|getCurrentUser|session|auth\(|getSession|requireAuth"
SANITIZER = r"(?i)DOMPurify|sanitize|xss|escape"
SCHEMA_VALIDATION = r"zod|yup|joi|validate|schema|parse\(|safeParse"
HTTP_MUTATION = r"POST|PUT|DELETE|PATCH"

TYPOSQUATS = (
    ("loadsh", "lodash"),
    ("axois", "axios"),
    ("recat", "react"),
    ("expresss", "express"),
    ("momment", "moment"),
    ("requets", "requests"),
    ("coffe-script", "coffee-script"),
    ("cross-env-", "cross-env"),
    ("event-stream-", "event-stream"),
)

# Packages with known supply-chain incidents; the version still needs review.
INCIDENT_PACKAGES = ("event-stream", "flatmap-stream", "ua-parser-js", "coa", "rc")

INJECTION = (
    define(
        "injection.sql",
        [
            (r"""\.raw\s*\(\s*`[^`]*\$\{[^{}`]*\}""", "SQL injection via raw query with template literal"),
            (r"""\.raw\s*\(\s*(['"])[^'"\n]*\1\s*\+""", "SQL injection via string concatenation in raw query"),
            (r"""execute\s*\(\s*`[^`]*\$\{[^{}`]*\}""", "SQL injection in execute statement"),
            (r"""query\s*\(\s*`[^`]*\$\{[^{}`]*\}""", "SQL injection in query with interpolation"),
        ],
        severity=Severity.CRITICAL,
        category="injection",
        owasp="A03:2021",
        hint="Use parameterized queries or prepared statements",
    ),
    define(
        "injection.command",
        [
            (r"""\bexec\s*\(\s*`[^`]*\$\{[^{}`]*\}""", "Command injection via exec()"),
            (r"""execSync\s*\(\s*`[^`]*\$\{[^{}`]*\}""", "Command injection via execSync()"),
            (r"""spawn\s*\([^,()\n]*,\s*\[[^\[\]\n]*\$\{[^{}\[\]\n]*\}""", "Command injection via spawn()"),
        ],
        severity=Severity.CRITICAL,
        category="injection",
        owasp="A03:2021",
    ),
    define(
        "injection.child-process",
        r"child_process",
        "child_process import - ensure no user input in commands",
        severity=Severity.CRITICAL,
        category="injection",
        owasp="A03:2021",
    ),
    define(
        "injection.sql-diff",
        [
            (r"^(?=.*\$\{)(?=.*(?:SELECT|INSERT|UPDATE|DELETE|DROP))", "Potential SQL injection in new code"),
            (r"(?:SELECT|INSERT|UPDATE|DELETE).*\+\s*(?:req|params|query|body)", "SQL with user input concatenation"),
        ],
        severity=Severity.CRITICAL,
        scope=DIFF,
        category="injection",
        owasp="A03:2021",
    ),
)

XSS = (
    define(
        "xss.dangerously-set-inner-html",
        r"dangerouslySetInnerHTML",
        "dangerouslySetInnerHTML without sanitization library",
        severity=Severity.CRITICAL,
        category="xss",
        owasp="A07:2021",
        hint="Sanitize HTML with DOMPurify before rendering",
        unless=SANITIZER,
        applies_to=COMPONENTS,
    ),
    define(
        "xss.inner-html",
        r"\.innerHTML",
        "innerHTML assignment without sanitization",
        severity=Severity.CRITICAL,
        category="xss",
        owasp="A07:2021",
        unless=SANITIZER,
        applies_to=COMPONENTS,
    ),
    define(
        "xss.document-write",
        r"document\.write",
        "document.write() is XSS-prone - avoid usage",
        severity=Severity.HIGH,
        category="xss",
        owasp="A07:2021",
        applies_to=COMPONENTS,
    ),
    define(
        "xss.javascript-href",
        r"""href\s*=\s*[`'"]?\s*javascript:""",
        "javascript: protocol in href - XSS vulnerability",
        severity=Severity.CRITICAL,
        scope=DIFF,
        category="xss",
        owasp="A07:2021",
    ),
)

SSRF = (
    define(
        "ssrf.user-controlled-url",
        [
            (r"fetch\s*\(\s*(?:req|params|query|body|searchParams)", "SSRF: fetch() with user-controlled URL"),
            (r"axios\s*\.\s*(?:get|post|put|delete)\s*\(\s*(?:req|params|query)", "SSRF: axios with user-controlled URL"),
            (r"http\.request\s*\(\s*(?:req|params|query)", "SSRF: http.request with user-controlled URL"),
            (r"new\s+URL\s*\(\s*" + USER_INPUT, "SSRF: URL constructor with user input"),
        ],
        severity=Severity.HIGH,
        category="ssrf",
        owasp="A10:2021",
        applies_to=SERVER_ENTRYPOINTS,
    ),
    define(
        "ssrf.missing-allowlist",
        r"fetch\(|axios",
        "External request without URL allowlist validation",
        severity=Severity.MEDIUM,
        category="ssrf",
        owasp="A10:2021",
        requires=(r"req\.",),
        unless=r"allowlist|whitelist|ALLOWED_",
        applies_to=SERVER_ENTRYPOINTS,
    ),
    define(
        "ssrf.dynamic-fetch",
        r"^(?=.*fetch\()(?=.*(?:\$\{|` \+))",
        "Dynamic URL in fetch() - validate against allowlist",
        severity=Severity.HIGH,
        scope=DIFF,
        category="ssrf",
        owasp="A10:2021",
    ),
)

ACCESS_CONTROL = (
    define(
        "access.server-action-auth",
        MUTATION_CALL,
        "Server Action performs mutation without authentication check",
        severity=Severity.HIGH,
        category="access-control",
        owasp="A01:2021",
        requires=(USE_SERVER,),
        unless=AUTH_CHECK,
        applies_to=SERVER_ACTIONS,
    ),
    define(
        "access.api-route-auth",
        HTTP_MUTATION,
        "API route handles mutations without authentication",
        severity=Severity.HIGH,
        category="access-control",
        owasp="A01:2021",
        unless=AUTH_CHECK,
        applies_to=API_ROUTES,
    ),
    define(
        "access.idor",
        r"params\??\.id",
        "Accessing resource by ID without ownership verification (potential IDOR)",
        severity=Severity.MEDIUM,
        category="access-control",
        owasp="A01:2021",
        unless=r"user_id|userId|owner",
        applies_to=SERVER_CODE,
    ),
)

CRYPTO = (
    define(
        "crypto.weak-algorithm",
        [
            (r"(?i)\bmd5\b", "MD5 is cryptographically broken - use SHA-256+"),
            (r"(?i)\bsha1\b", "SHA1 is weak - use SHA-256+"),
            (r"(?i)createCipher\(", "createCipher is deprecated - use createCipheriv"),
            (r"(?i)\bDES\b", "DES cipher is insecure - use AES-256"),
            (r"(?i)\bRC4\b", "RC4 is broken - use AES-256"),
            (r"(?i)crypto\.createDecipher\b", "createDecipher is deprecated - use createDecipheriv"),
        ],
        severity=Severity.HIGH,
        category="crypto",
        owasp="A02:2021",
    ),
    define(
        "crypto.hardcoded-secret",
        [
            (
                r"""(?i)(?:api[_-]?key|secret|password|token)\s*[:=]\s*['"][^'"]{8,}['"]""",
                "Potential hardcoded secret/credential ({count} occurrence(s))",
            ),
            (r"(?i)bearer\s+[a-zA-Z0-9_-]{20,}", "Potential hardcoded bearer token ({count} occurrence(s))"),
        ],
        severity=Severity.CRITICAL,
        category="secrets",
        owasp="A02:2021",
        hint="Load credentials from environment variables or a secret manager",
        applies_to=PathFilter(excludes=(".env", "example")),
        count_occurrences=True,
    ),
    define(
        "crypto.sensitive-storage",
        [
            (r"localStorage\.setItem.*(?i:password|token|secret|key|auth)", "Sensitive data in localStorage"),
            (r"sessionStorage\.setItem.*(?i:password|secret|key)", "Sensitive data in sessionStorage"),
            (r"cookie.*(?i:password)", "Password in cookie - use httpOnly secure cookies"),
        ],
        severity=Severity.HIGH,
        scope=DIFF,
        category="crypto",
        owasp="A02:2021",
        hint="Keep tokens in httpOnly cookies managed by the server",
    ),
)

INSECURE_DESIGN = (
    define(
        "design.path-traversal",
        [
            (r"(?:readFile|writeFile|unlink|rmdir)\s*\([^()\n]*(?:req|params|query)", "Path traversal: file operation with user input"),
            (r"path\.join\s*\([^()\n]*(?:req|params|query)", "Path traversal: path.join with user input"),
            (r"fs\.[a-zA-Z]+\s*\([^()\n]*\.\.", "Path traversal: '..' in file path"),
        ],
        severity=Severity.CRITICAL,
        category="insecure-design",
        owasp="A04:2021",
    ),
    define(
        "design.open-redirect",
        [
            (r"redirect\s*\(\s*(?:req|params|query|searchParams)", "Open redirect: redirect with user-controlled URL"),
            (r"router\.push\s*\(\s*(?:req|params|query)", "Open redirect: router.push with user input"),
            (r"window\.location\s*=\s*(?:req|params|query)", "Open redirect: window.location with user input"),
            (r"""location\.href\s*=\s*[^'"][^;=\n]*(?:req|params|query)""", "Open redirect: location.href with user input"),
        ],
        severity=Severity.HIGH,
        category="insecure-design",
        owasp="A04:2021",
    ),
    define(
        "design.unvalidated-redirect",
        r"redirect\(|router\.push\(",
        "Redirect without URL validation - validate against allowlist",
        severity=Severity.MEDIUM,
        category="insecure-design",
        owasp="A04:2021",
        requires=(r"searchParams|query\.",),
        unless=r"startsWith|URL\(|allowedHosts",
    ),
    define(
        "design.path-traversal-diff",
        r"^(?=.*\.\.)(?=.*(?:path|file|fs\.))",
        "Potential path traversal pattern in new code",
        severity=Severity.HIGH,
        scope=DIFF,
        category="insecure-design",
        owasp="A04:2021",
    ),
)

MISCONFIGURATION = (
    define(
        "config.no-security-headers",
        ALWAYS,
        "No security headers configured in next.config",
        severity=Severity.MEDIUM,
        category="misconfiguration",
        owasp="A05:2021",
        unless=r"headers",
        applies_to=NEXT_CONFIG,
    ),
    *(
        define(
            f"config.missing-{slug}",
            r"headers",
            message,
            severity=Severity.MEDIUM,
            category="misconfiguration",
            owasp="A05:2021",
            unless=re.escape(header),
            applies_to=NEXT_CONFIG,
        )
        for slug, header, message in (
            ("x-frame-options", "X-Frame-Options", "Missing X-Frame-Options header (clickjacking protection)"),
            ("x-content-type-options", "X-Content-Type-Options", "Missing X-Content-Type-Options header"),
            ("hsts", "Strict-Transport-Security", "Missing HSTS header"),
            ("csp", "Content-Security-Policy", "Missing CSP header"),
        )
    ),
    define(
        "config.dangerously-allow-svg",
        r"dangerouslyAllowSVG:\s*true",
        "dangerouslyAllowSVG enabled - SVGs can contain scripts",
        severity=Severity.MEDIUM,
        category="misconfiguration",
        owasp="A05:2021",
        applies_to=NEXT_CONFIG,
    ),
    define(
        "config.ignore-build-errors",
        r"ignoreBuildErrors:\s*true",
        "ignoreBuildErrors enabled - may hide security issues",
        severity=Severity.LOW,
        category="misconfiguration",
        owasp="A05:2021",
        applies_to=NEXT_CONFIG,
    ),
    define(
        "config.vercel-headers",
        ALWAYS,
        "Consider adding security headers in vercel.json",
        severity=Severity.LOW,
        category="misconfiguration",
        owasp="A05:2021",
        unless=r"headers",
        applies_to=VERCEL_CONFIG,
    ),
    define(
        "config.development-mode",
        r"NODE_ENV",
        "Ensure debug/development mode is disabled in production",
        severity=Severity.LOW,
        category="misconfiguration",
        owasp="A05:2021",
        requires=(r"development", r"==="),
        unless=r"!=",
        applies_to=PathFilter(contains=("middleware", "config")),
    ),
)

SUPPLY_CHAIN = (
    define(
        "supply.typosquatting",
        [
            (re.escape(typo), f"Potential typosquatting: '{typo}' - did you mean '{correct}'?")
            for typo, correct in TYPOSQUATS
        ],
        severity=Severity.CRITICAL,
        category="supply-chain",
        owasp="A06:2021",
        applies_to=PACKAGE_MANIFEST,
    ),
    define(
        "supply.incident-package",
        [
            (re.escape(f'"{package}"'), f"Package '{package}' has known security incidents - verify version")
            for package in INCIDENT_PACKAGES
        ],
        severity=Severity.HIGH,
        category="supply-chain",
        owasp="A06:2021",
        applies_to=PACKAGE_MANIFEST,
    ),
    define(
        "supply.git-dependency",
        r"github:|git\+|git://",
        "Git-based dependency added - prefer npm registry packages",
        severity=Severity.MEDIUM,
        scope=DIFF,
        category="supply-chain",
        owasp="A06:2021",
    ),
    define(
        "supply.insecure-url",
        r"http://",
        "HTTP dependency URL - use HTTPS only",
        severity=Severity.HIGH,
        scope=DIFF,
        category="supply-chain",
        owasp="A06:2021",
        unless=r"localhost",
    ),
)

RUNTIME = (
    define(
        "runtime.dynamic-execution",
        [
            (r"\beval\s*\(", "eval() is dangerous - avoid dynamic code execution"),
            (r"new\s+Function\s*\(", "Function constructor is dangerous - avoid dynamic code"),
            (r"""setTimeout\s*\(\s*['"]""", "setTimeout with string is eval-like - use function"),
            (r"""setInterval\s*\(\s*['"]""", "setInterval with string is eval-like - use function"),
        ],
        severity=Severity.CRITICAL,
        category="dynamic-execution",
        owasp="A03:2021",
    ),
    define(
        "runtime.prototype-pollution",
        [
            (r"__proto__", "Prototype pollution risk: __proto__ usage"),
            (r"""constructor\s*\[\s*['"]prototype""", "Prototype pollution: constructor.prototype access"),
            (r"Object\.assign\s*\(\s*\{\s*\}\s*,\s*(?:req|params|body)", "Prototype pollution: Object.assign with user input"),
            (r"\.\.\." + USER_INPUT, "Prototype pollution: spreading user input directly"),
        ],
        severity=Severity.HIGH,
        category="prototype-pollution",
        owasp="A03:2021",
    ),
    define(
        "runtime.unguarded-json-parse",
        r"JSON\.parse",
        "JSON.parse without try-catch - can crash on malformed input",
        severity=Severity.MEDIUM,
        category="dynamic-execution",
        owasp="A03:2021",
        requires=(r"req\.body|params",),
        unless=r"try|catch",
    ),
    define(
        "runtime.dynamic-execution-diff",
        r"eval\(|new Function\(",
        "Dynamic code execution added - review carefully",
        severity=Severity.CRITICAL,
        scope=DIFF,
        category="dynamic-execution",
        owasp="A03:2021",
    ),
)

INTEGRITY = (
    define(
        "integrity.script-sri",
        r"""<script[^<>]+src\s*=\s*["']https?://""",
        "External script without SRI (Subresource Integrity) hash",
        severity=Severity.MEDIUM,
        category="integrity",
        owasp="A08:2021",
        unless=r"""integrity\s*=\s*["']sha""",
        applies_to=MARKUP,
    ),
    define(
        "integrity.stylesheet-sri",
        r"""<link[^<>]+href\s*=\s*["']https?://""",
        "External stylesheet without SRI hash",
        severity=Severity.LOW,
        category="integrity",
        owasp="A08:2021",
        unless=r"""integrity\s*=\s*["']sha""",
        applies_to=MARKUP,
    ),
    define(
        "integrity.remote-patterns-wildcard",
        r"remotePatterns",
        "Wildcard in remotePatterns - restrict to specific domains",
        severity=Severity.MEDIUM,
        category="integrity",
        owasp="A08:2021",
        requires=(r"\*",),
        applies_to=NEXT_CONFIG,
    ),
    define(
        "integrity.cdn-without-hash",
        r"cdn\.|unpkg\.com|jsdelivr",
        "CDN resource added without integrity hash",
        severity=Severity.MEDIUM,
        scope=DIFF,
        category="integrity",
        owasp="A08:2021",
        unless=r"integrity",
    ),
)

SECURITY_LOGGING = (
    define(
        "logging.auth-events",
        r"(?i)login|signin|signout|logout|password|auth",
        "Auth-related code without security logging",
        severity=Severity.LOW,
        category="logging",
        owasp="A09:2021",
        unless=r"console\.|logger\.|log\(|audit",
        applies_to=SERVER_CODE,
    ),
    define(
        "logging.silent-catch",
        r"catch",
        "Error catch block without logging - security events may be missed",
        severity=Severity.LOW,
        category="logging",
        owasp="A09:2021",
        unless=r"console\.error|logger",
        applies_to=SERVER_CODE,
    ),
)

CSRF = (
    define(
        "csrf.api-route",
        HTTP_MUTATION,
        "API route handles mutations without CSRF protection",
        severity=Severity.MEDIUM,
        category="csrf",
        owasp="A01:2021",
        # Server Actions carry their own CSRF protection.
        unless=r"(?i)csrf|use server",
        applies_to=API_ROUTES,
    ),
    define(
        "csrf.form-post",
        r"""(?i)<form[^<>]+method\s*=\s*["']post["']""",
        "Form POST without Server Action or CSRF token",
        severity=Severity.MEDIUM,
        category="csrf",
        owasp="A01:2021",
        unless=r"action=\{|csrf",
        applies_to=COMPONENTS,
    ),
)

INPUT_VALIDATION = (
    define(
        "input.schema-validation",
        r"formData|req\.body|request\.json|searchParams",
        "User input without schema validation (use zod/yup)",
        severity=Severity.MEDIUM,
        category="input-validation",
        owasp="A03:2021",
        unless=SCHEMA_VALIDATION,
        applies_to=SERVER_CODE,
    ),
    define(
        "input.type-assertion",
        r"\bas (?:string|number)\b",
        "Type assertion without validation - use schema validation",
        severity=Severity.LOW,
        category="input-validation",
        owasp="A03:2021",
        unless=SCHEMA_VALIDATION,
        applies_to=SERVER_CODE,
    ),
)

JWT_USAGE = r"(?i)jwt|jsonwebtoken"

JWT = (
    define(
        "jwt.weak-algorithm",
        [
            (r"""(?i)algorithms?\W{0,6}\[?\s*["']none["']""", "JWT 'none' algorithm allows unsigned tokens"),
            (r"""(?im)^(?=[^\n]*\balg)(?=[^\n]*["']HS256["'])(?=[^\n]*public)""", "HS256 with public key is vulnerable to key confusion"),
        ],
        severity=Severity.CRITICAL,
        category="jwt",
        owasp="A02:2021",
        requires=(JWT_USAGE,),
    ),
    define(
        "jwt.token-in-url",
        r"token=",
        "JWT in URL query parameter - use Authorization header",
        severity=Severity.MEDIUM,
        category="jwt",
        owasp="A02:2021",
        requires=(r"jwt",),
    ),
    define(
        "jwt.missing-expiry",
        r"sign\(",
        "JWT created without expiration - tokens should expire",
        severity=Severity.HIGH,
        category="jwt",
        owasp="A02:2021",
        requires=(JWT_USAGE,),
        unless=r"expiresIn|exp",
    ),
    define(
        "jwt.local-storage",
        r"^(?=.*(?i:jwt))(?=.*localStorage)",
        "JWT stored in localStorage - use httpOnly cookies",
        severity=Severity.HIGH,
        scope=DIFF,
        category="jwt",
        owasp="A02:2021",
    ),
)

NESTED_QUANTIFIERS = [
    (r"\(\.\*\)\+", "Nested quantifiers (.*)+ can cause ReDoS"),
    (r"\(\[[^\]\n]*\]\+\)\+", "Nested quantifiers ([...]+)+ can cause ReDoS"),
    (r"\(\.\+\)\+", "Nested quantifiers (.+)+ can cause ReDoS"),
    (r"\(\.\*\)\*", "Nested quantifiers (.*)* can cause ReDoS"),
    (r"\(\[\^[^\]\n]*\]\*\)\+", "Nested quantifiers with negation can cause ReDoS"),
]

REDOS = (
    define(
        "redos.nested-quantifier",
        NESTED_QUANTIFIERS,
        severity=Severity.MEDIUM,
        category="redos",
        owasp="A03:2021",
        requires=(r"new RegExp|Regex::new|\.match\(",),
    ),
    define(
        "redos.user-regexp",
        r"new\s+RegExp\s*\(\s*(?:req|params|query|body|input)",
        "User input in RegExp constructor - sanitize or use literal",
        severity=Severity.HIGH,
        category="redos",
        owasp="A03:2021",
    ),
    define(
        "redos.vulnerable-regexp-diff",
        r"new RegExp.*(?:" + "|".join(regex for regex, _ in NESTED_QUANTIFIERS) + ")",
        "Potentially vulnerable regex pattern added",
        severity=Severity.MEDIUM,
        scope=DIFF,
        category="redos",
        owasp="A03:2021",
    ),
)

TIMING = (
    define(
        "timing.secret-comparison",
        [
            (r"(?i)===\s*(?:password|secret|token|key|hash)", "Direct comparison of secret - use constant-time comparison"),
            (r"(?i)(?:password|secret|token|key|hash)\s*===", "Direct comparison of secret - use constant-time comparison"),
            (r"(?i)\.equals\s*\(\s*(?:password|secret|token)", "String equals on secret - use constant-time comparison"),
        ],
        severity=Severity.MEDIUM,
        category="timing",
        owasp="A02:2021",
        unless=r"timingSafeEqual|constantTimeCompare",
    ),
    define(
        "timing.plain-password-comparison",
        r"password",
        "Password comparison without bcrypt/argon2 - use proper hashing",
        severity=Severity.HIGH,
        category="timing",
        owasp="A02:2021",
        requires=(r"===",),
        unless=r"bcrypt|argon2|scrypt",
    ),
    define(
        "timing.secret-comparison-diff",
        r"^(?=.*(?i:password|secret|token)).*==",
        "Secret comparison added - consider constant-time comparison",
        severity=Severity.MEDIUM,
        scope=DIFF,
        category="timing",
        owasp="A02:2021",
        unless=r"timingSafeEqual",
    ),
)

RULES = (
    *INJECTION,
    *XSS,
    *SSRF,
    *ACCESS_CONTROL,
    *CRYPTO,
    *INSECURE_DESIGN,
    *MISCONFIGURATION,
    *SUPPLY_CHAIN,
    *RUNTIME,
    *INTEGRITY,
    *SECURITY_LOGGING,
    *CSRF,
    *INPUT_VALIDATION,
    *JWT,
    *REDOS,
    *TIMING,
)
