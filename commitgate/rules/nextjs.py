"""Next.js, React and Vercel edge rules, plus project conventions."""

from __future__ import annotations

from commitgate.severity import Severity

from . import PathFilter, Scope, define
from .owasp import API_ROUTES, COMPONENTS, MUTATION_CALL, SERVER_ACTIONS, USE_SERVER, VERCEL_CONFIG

MIDDLEWARE = PathFilter(contains=("middleware",))
EDGE_RUNTIME = (r"edge", r"runtime")
USE_CLIENT = r"use client"

NEXTJS = (
    define(
        "nextjs.action-cache-invalidation",
        MUTATION_CALL,
        "Server Action mutates without cache invalidation",
        severity=Severity.MEDIUM,
        category="nextjs",
        requires=(USE_SERVER,),
        unless=r"invalidateTag|revalidatePath",
        applies_to=SERVER_ACTIONS,
    ),
    define(
        "nextjs.action-input-validation",
        r"formData\.get",
        "Server Action lacks input validation - use zod or similar",
        severity=Severity.MEDIUM,
        category="nextjs",
        owasp="A03:2021",
        requires=(USE_SERVER,),
        unless=r"zod|yup|validate",
        applies_to=SERVER_ACTIONS,
    ),
    define(
        "nextjs.action-returns-secret",
        r"\breturn\b",
        "Server Action may be returning sensitive data to client",
        severity=Severity.HIGH,
        category="nextjs",
        owasp="A01:2021",
        requires=(USE_SERVER, r"password|secret|token"),
    ),
    define(
        "nextjs.sensitive-props",
        r"password=|secret=|token=",
        "Sensitive data passed as props - may be serialized to client",
        severity=Severity.HIGH,
        category="nextjs",
        owasp="A01:2021",
        unless=USE_CLIENT,
        applies_to=COMPONENTS,
    ),
    define(
        "nextjs.metadata-injection",
        r"generateMetadata",
        "generateMetadata with params - ensure proper escaping for SEO injection",
        severity=Severity.LOW,
        category="nextjs",
        owasp="A03:2021",
        requires=(r"params",),
        unless=r"sanitize|escape",
    ),
)

VERCEL = (
    define(
        "vercel.middleware-matcher",
        r"matcher",
        "Middleware matcher may not exclude internal paths (_next, api)",
        severity=Severity.MEDIUM,
        category="edge-runtime",
        owasp="A01:2021",
        unless=r"/\(\(\?!|/_next",
        applies_to=MIDDLEWARE,
    ),
    define(
        "vercel.middleware-passthrough",
        r"NextResponse\.next\(\)",
        "Middleware passes all requests - add authentication checks",
        severity=Severity.HIGH,
        category="edge-runtime",
        owasp="A01:2021",
        unless=r"\bif\b|token|session",
        applies_to=MIDDLEWARE,
    ),
    define(
        "vercel.middleware-redirect",
        r"NextResponse\.redirect",
        "Middleware redirect with user URL - validate destination",
        severity=Severity.MEDIUM,
        category="edge-runtime",
        owasp="A04:2021",
        requires=(r"request\.nextUrl",),
        unless=r"startsWith",
        applies_to=MIDDLEWARE,
    ),
    define(
        "vercel.edge-node-api",
        r"\bfs\b|child_process",
        "Edge runtime cannot use Node.js APIs (fs, child_process)",
        severity=Severity.HIGH,
        category="edge-runtime",
        requires=EDGE_RUNTIME,
        applies_to=API_ROUTES,
    ),
    define(
        "vercel.edge-node-crypto",
        r"crypto\.",
        "Edge runtime: use Web Crypto API instead of Node crypto",
        severity=Severity.LOW,
        category="edge-runtime",
        requires=EDGE_RUNTIME,
        unless=r"webcrypto",
        applies_to=API_ROUTES,
    ),
    define(
        "vercel.rate-limit",
        r"POST|PUT",
        "API route lacks rate limiting - consider adding protection",
        severity=Severity.LOW,
        category="edge-runtime",
        owasp="A04:2021",
        unless=r"rateLimit|rate-limit",
        applies_to=API_ROUTES,
    ),
    define(
        "vercel.wildcard-cors",
        r"Access-Control-Allow-Origin",
        "Wildcard CORS origin - restrict to specific domains",
        severity=Severity.MEDIUM,
        category="misconfiguration",
        owasp="A05:2021",
        requires=(r"\*",),
        applies_to=VERCEL_CONFIG,
    ),
    define(
        "vercel.source-maps",
        r"sourceMap",
        "Source maps enabled - may expose source code in production",
        severity=Severity.LOW,
        category="misconfiguration",
        owasp="A05:2021",
        requires=(r"true",),
        applies_to=VERCEL_CONFIG,
    ),
)

REACT = (
    define(
        "react.native-web-style",
        r"react-native-web",
        "CVE-2021-27913: Dynamic styles in react-native-web can lead to XSS",
        severity=Severity.HIGH,
        category="react",
        owasp="A07:2021",
        requires=(r"style=", r"\$\{|` \+"),
        applies_to=COMPONENTS,
    ),
    define(
        "react.dynamic-component",
        r"<\s*\{[^{}\n]*\}",
        "Dynamic component rendering - ensure component name is validated",
        severity=Severity.HIGH,
        category="react",
        owasp="A03:2021",
        applies_to=COMPONENTS,
    ),
    define(
        "react.prop-spreading",
        r"\{\.\.\.(?:props|rest)\}",
        "Prop spreading on form elements - may allow attribute injection",
        severity=Severity.LOW,
        category="react",
        owasp="A03:2021",
        requires=(r"<form|<input|<button",),
        applies_to=COMPONENTS,
    ),
    define(
        "react.effect-fetch",
        r"useEffect",
        "Client-side fetch in useEffect - prefer Server Components for data fetching",
        severity=Severity.MEDIUM,
        category="react",
        requires=(r"fetch\(",),
        applies_to=COMPONENTS,
    ),
    define(
        "react.ref-inner-html",
        r"ref\.current\.innerHTML",
        "Direct innerHTML via ref - use dangerouslySetInnerHTML with sanitization",
        severity=Severity.HIGH,
        category="react",
        owasp="A07:2021",
        applies_to=COMPONENTS,
    ),
    define(
        "react.target-blank",
        r'target="_blank"',
        'target="_blank" without rel="noopener noreferrer" - tabnabbing risk',
        severity=Severity.LOW,
        scope=Scope.DIFF_ADDED_LINE,
        category="react",
        owasp="A05:2021",
        unless=r"noopener|noreferrer",
    ),
)

PROJECT = (
    define(
        "project.server-client-await",
        r"createClient\(\)",
        "Missing await on server createClient() - will fail at runtime",
        severity=Severity.HIGH,
        category="project-conventions",
        requires=(r"supabase/server",),
        unless=USE_CLIENT + r"|await createClient\(\)",
    ),
    define(
        "project.server-client-in-client-component",
        r"supabase/server",
        "Server Supabase client imported in client component - use @/lib/supabase/client",
        severity=Severity.CRITICAL,
        category="project-conventions",
        owasp="A01:2021",
        requires=(USE_CLIENT,),
    ),
    define(
        "project.tanstack-query",
        r"\b(?:useQuery|useMutation|QueryClient)\b",
        "TanStack Query detected - use Server Components for data fetching",
        severity=Severity.LOW,
        category="project-conventions",
    ),
    define(
        "project.redux",
        r"\b(?:useSelector|useDispatch|createSlice)\b",
        "Redux detected - use Zustand for UI state only",
        severity=Severity.LOW,
        category="project-conventions",
    ),
    define(
        "project.hooks-without-use-client",
        r"\b(?:useState|useEffect|useRef|useCallback|useMemo)\s*\(",
        "React hooks used without 'use client' directive",
        severity=Severity.HIGH,
        category="project-conventions",
        unless=USE_CLIENT,
        applies_to=PathFilter(suffixes=(".tsx", ".jsx"), excludes=("/hooks/",)),
    ),
    define(
        "project.server-env-in-client",
        r"(?i)SUPABASE_SERVICE_ROLE|DATABASE_URL|SECRET_KEY|PRIVATE_KEY|API_SECRET",
        "Server-only env var referenced in client component",
        severity=Severity.CRITICAL,
        category="project-conventions",
        owasp="A01:2021",
        requires=(USE_CLIENT,),
    ),
    define(
        "project.client-env-prefix",
        r"process\.env\.(?!NEXT_PUBLIC_|NODE_ENV\b)[A-Z][A-Z0-9_]*",
        "{match} needs NEXT_PUBLIC_ prefix for client access",
        severity=Severity.HIGH,
        category="project-conventions",
        owasp="A01:2021",
        requires=(USE_CLIENT,),
    ),
    define(
        "project.next-image",
        r"<img\s",
        "Use next/image instead of <img> for optimization and security",
        severity=Severity.LOW,
        category="project-conventions",
        unless=r"next/image",
        applies_to=COMPONENTS,
    ),
)

RULES = (*NEXTJS, *VERCEL, *REACT, *PROJECT)
