"""Built-in WordPress tool catalog.

Metadata only: names, categories, descriptions, parameter schemas and
feature flags for the WordPress tool set. Handlers live with the server
that proxies calls; the access-control layer only needs to know what
exists.
"""

import logging
from typing import Optional

from toolgate.tools.definitions import ToolParameter
from toolgate.tools.registry import Tool, ToolCategory, ToolRegistry, create_tool

logger = logging.getLogger(__name__)

# Feature flags gating AI workflow tools
WORKFLOWS_ENABLED = "WORKFLOWS_ENABLED"
WP_BULK_VALIDATOR_ENABLED = "WP_BULK_VALIDATOR_ENABLED"
WP_SEO_AUDIT_ENABLED = "WP_SEO_AUDIT_ENABLED"
WP_CONTENT_REVIEWER_ENABLED = "WP_CONTENT_REVIEWER_ENABLED"
WP_MIGRATION_PLANNER_ENABLED = "WP_MIGRATION_PLANNER_ENABLED"
WP_PERFORMANCE_ANALYZER_ENABLED = "WP_PERFORMANCE_ANALYZER_ENABLED"

BUILTIN_FEATURE_FLAGS: tuple[str, ...] = (
    WORKFLOWS_ENABLED,
    WP_BULK_VALIDATOR_ENABLED,
    WP_SEO_AUDIT_ENABLED,
    WP_CONTENT_REVIEWER_ENABLED,
    WP_MIGRATION_PLANNER_ENABLED,
    WP_PERFORMANCE_ANALYZER_ENABLED,
)

_ID = ToolParameter(name="id", type="integer", description="Item ID")
_SLUG = ToolParameter(name="slug", type="string", description="Item slug")
_PAGE = ToolParameter(
    name="page", type="integer", description="Page number", required=False, default=1
)
_PER_PAGE = ToolParameter(
    name="per_page",
    type="integer",
    description="Items per page (max 100)",
    required=False,
    default=10,
)
_STATUS = ToolParameter(
    name="status",
    type="string",
    description="Filter by status",
    required=False,
    enum=("publish", "draft", "pending", "private", "future", "any"),
)
_SEARCH = ToolParameter(
    name="search", type="string", description="Search term", required=False
)
_TITLE = ToolParameter(name="title", type="string", description="Title")
_CONTENT = ToolParameter(
    name="content", type="string", description="Content (HTML or blocks)", required=False
)
_FORCE = ToolParameter(
    name="force",
    type="boolean",
    description="Bypass trash and delete permanently",
    required=False,
    default=False,
)
_ITEMS = ToolParameter(
    name="items",
    type="array",
    description="Batch items",
    items={"type": "object"},
)
_CONFIRM = ToolParameter(
    name="confirm_destructive",
    type="boolean",
    description="Must be true to run a destructive operation",
)
_POST_ID = ToolParameter(name="post_id", type="integer", description="Post or page ID")
_BLOCK_PATH = ToolParameter(
    name="path", type="array", description="Block path", items={"type": "integer"}
)

_LIST = [_PAGE, _PER_PAGE, _SEARCH]
_LIST_STATUS = [_PAGE, _PER_PAGE, _STATUS, _SEARCH]

# (name, description, parameters)
_Entry = tuple[str, str, list[ToolParameter]]

_CORE: list[_Entry] = [
    ("wpnav_introspect", "Get WP Navigator API capabilities and site information", []),
    ("wpnav_get_site_overview", "Summarize the site: content counts, plugins, theme", []),
    ("wpnav_list_post_types", "List registered post types", []),
    ("wpnav_context", "Compact site context for agent sessions", []),
    (
        "wpnav_search_tools",
        "Search available tools by keyword or category",
        [ToolParameter(name="query", type="string", description="Search query")],
    ),
    (
        "wpnav_describe_tools",
        "Return full schemas for the named tools",
        [
            ToolParameter(
                name="tools",
                type="array",
                description="Tool names",
                items={"type": "string"},
            )
        ],
    ),
    (
        "wpnav_execute",
        "Execute a tool by name with arguments",
        [
            ToolParameter(name="tool", type="string", description="Tool name"),
            ToolParameter(
                name="arguments",
                type="object",
                description="Tool arguments",
                required=False,
            ),
        ],
    ),
]

_CONTENT_TOOLS: list[_Entry] = [
    ("wpnav_list_posts", "List WordPress blog posts with optional filtering", _LIST_STATUS),
    ("wpnav_get_post", "Get a single WordPress post by ID", [_ID]),
    ("wpnav_create_post", "Create a new WordPress blog post", [_TITLE, _CONTENT, _STATUS]),
    (
        "wpnav_create_post_with_blocks",
        "Create a new post with Gutenberg blocks in a single atomic operation",
        [
            _TITLE,
            ToolParameter(
                name="blocks",
                type="array",
                description="Blocks to insert",
                items={"type": "object"},
            ),
            _STATUS,
        ],
    ),
    ("wpnav_update_post", "Update a WordPress post", [_ID, _TITLE, _CONTENT, _STATUS]),
    ("wpnav_delete_post", "Delete a WordPress post by ID", [_ID, _FORCE]),
    ("wpnav_list_pages", "List WordPress pages with optional filtering", _LIST_STATUS),
    ("wpnav_get_page", "Get a single WordPress page by ID", [_ID]),
    ("wpnav_create_page", "Create a new WordPress page", [_TITLE, _CONTENT, _STATUS]),
    ("wpnav_update_page", "Update a WordPress page", [_ID, _TITLE, _CONTENT, _STATUS]),
    ("wpnav_delete_page", "Delete a WordPress page by ID", [_ID, _FORCE]),
    ("wpnav_snapshot_page", "Capture a page's structure and blocks for editing", [_ID]),
    ("wpnav_get_full_content", "Fetch untruncated content for a post or page", [_ID]),
    ("wpnav_list_media", "List WordPress media library items", _LIST),
    ("wpnav_get_media", "Get a single media item by ID", [_ID]),
    (
        "wpnav_upload_media_from_url",
        "Download an image from a URL into the media library",
        [
            ToolParameter(name="url", type="string", description="Source URL"),
            ToolParameter(
                name="alt_text", type="string", description="Alt text", required=False
            ),
        ],
    ),
    ("wpnav_delete_media", "Delete a media item by ID", [_ID, _FORCE]),
    ("wpnav_list_comments", "List WordPress comments with optional filtering", _LIST),
    ("wpnav_get_comment", "Get a single comment by ID", [_ID]),
    (
        "wpnav_create_comment",
        "Create a new comment on a post",
        [_POST_ID, ToolParameter(name="content", type="string", description="Comment text")],
    ),
    ("wpnav_update_comment", "Update a comment's status or content", [_ID, _CONTENT]),
    ("wpnav_delete_comment", "Delete a comment by ID", [_ID, _FORCE]),
    # Gutenberg block editing is exposed as content tools
    ("wpnav_gutenberg_introspect", "Describe the block editor and registered blocks", []),
    ("wpnav_gutenberg_list_blocks", "List the blocks of a post or page", [_POST_ID]),
    (
        "wpnav_gutenberg_insert_block",
        "Insert a block at a path",
        [_POST_ID, _BLOCK_PATH, ToolParameter(name="block", type="object", description="Block")],
    ),
    (
        "wpnav_gutenberg_replace_block",
        "Replace an existing Gutenberg block at a path with a new block",
        [_POST_ID, _BLOCK_PATH, ToolParameter(name="block", type="object", description="Block")],
    ),
    (
        "wpnav_gutenberg_move_block",
        "Move a block to a new path",
        [_POST_ID, _BLOCK_PATH, ToolParameter(name="to", type="array", description="Target path")],
    ),
    ("wpnav_gutenberg_delete_block", "Delete the block at a path", [_POST_ID, _BLOCK_PATH]),
    ("wpnav_gutenberg_list_patterns", "List available block patterns", []),
    (
        "wpnav_gutenberg_insert_pattern",
        "Insert a block pattern into a post or page",
        [_POST_ID, ToolParameter(name="pattern", type="string", description="Pattern name")],
    ),
]

_TAXONOMY: list[_Entry] = [
    ("wpnav_list_categories", "List all WordPress categories", _LIST),
    ("wpnav_get_category", "Get a single WordPress category by ID", [_ID]),
    (
        "wpnav_create_category",
        "Create a new WordPress category",
        [ToolParameter(name="name", type="string", description="Category name")],
    ),
    ("wpnav_update_category", "Update a WordPress category", [_ID]),
    ("wpnav_delete_category", "Delete a WordPress category by ID", [_ID]),
    ("wpnav_list_tags", "List all WordPress tags", _LIST),
    ("wpnav_get_tag", "Get a single WordPress tag by ID", [_ID]),
    (
        "wpnav_create_tag",
        "Create a new WordPress tag",
        [ToolParameter(name="name", type="string", description="Tag name")],
    ),
    ("wpnav_update_tag", "Update a WordPress tag", [_ID]),
    ("wpnav_delete_tag", "Delete a WordPress tag by ID", [_ID]),
    ("wpnav_list_taxonomies", "List all registered WordPress taxonomies", []),
    (
        "wpnav_get_taxonomy",
        "Get details about a specific taxonomy by name",
        [ToolParameter(name="taxonomy", type="string", description="Taxonomy name")],
    ),
]

_USERS: list[_Entry] = [
    ("wpnav_list_users", "List WordPress users with role filtering", _LIST),
    ("wpnav_get_user", "Get a single user by ID", [_ID]),
    (
        "wpnav_create_user",
        "Create a new WordPress user",
        [
            ToolParameter(name="username", type="string", description="Login name"),
            ToolParameter(name="email", type="string", description="Email address"),
        ],
    ),
    ("wpnav_update_user", "Update a WordPress user", [_ID]),
    ("wpnav_delete_user", "Delete a WordPress user", [_ID]),
]

_PLUGINS: list[_Entry] = [
    ("wpnav_list_plugins", "List installed WordPress plugins with status information", []),
    ("wpnav_get_plugin", "Get details about an installed plugin", [_SLUG]),
    ("wpnav_install_plugin", "Install a plugin from WordPress.org", [_SLUG]),
    ("wpnav_activate_plugin", "Activate a WordPress plugin by slug", [_SLUG]),
    ("wpnav_deactivate_plugin", "Deactivate a WordPress plugin by slug", [_SLUG]),
    ("wpnav_update_plugin", "Update a plugin to its latest version", [_SLUG]),
    ("wpnav_delete_plugin", "Delete an inactive plugin", [_SLUG]),
]

_THEMES: list[_Entry] = [
    ("wpnav_list_themes", "List all installed WordPress themes", []),
    ("wpnav_get_theme", "Get details about a specific theme by slug", [_SLUG]),
    ("wpnav_install_theme", "Install a WordPress theme from WordPress.org", [_SLUG]),
    ("wpnav_activate_theme", "Activate an installed WordPress theme", [_SLUG]),
    ("wpnav_update_theme", "Update an installed theme to the latest version", [_SLUG]),
    ("wpnav_delete_theme", "Delete an installed, inactive theme", [_SLUG]),
    ("wpnav_revert_theme", "Revert to the previously active theme", []),
]

_SETTINGS: list[_Entry] = [
    ("wpnav_site_settings", "Read general site settings", []),
    ("wpnav_update_settings", "Update general site settings", []),
    (
        "wpnav_get_option",
        "Read a single WordPress option",
        [ToolParameter(name="option", type="string", description="Option name")],
    ),
    (
        "wpnav_set_option",
        "Write a single WordPress option",
        [
            ToolParameter(name="option", type="string", description="Option name"),
            ToolParameter(name="value", type="string", description="Option value"),
        ],
    ),
]

_ANALYTICS: list[_Entry] = [
    ("wpnav_site_health", "Run WordPress site health checks", []),
    ("wpnav_site_statistics", "Content and user counts for the site", []),
]

_DISCOVERY: list[_Entry] = [
    ("wpnav_list_shortcodes", "List registered shortcodes", []),
    ("wpnav_list_block_patterns", "List registered block patterns", []),
    ("wpnav_list_block_templates", "List block templates and template parts", []),
    ("wpnav_list_rest_routes", "List available REST API routes", []),
]

_MAINTENANCE: list[_Entry] = [
    ("wpnav_get_rewrite_rules", "Show the current rewrite rules", []),
    ("wpnav_flush_rewrite", "Flush rewrite rules", []),
    ("wpnav_get_maintenance", "Show maintenance mode status", []),
    (
        "wpnav_set_maintenance",
        "Turn maintenance mode on or off",
        [ToolParameter(name="enabled", type="boolean", description="Maintenance mode")],
    ),
]

_AUTH: list[_Entry] = [
    ("wpnav_jwt_token", "Issue a JWT access token", []),
    ("wpnav_jwt_refresh", "Refresh a JWT access token", []),
    ("wpnav_jwt_revoke", "Revoke a JWT token", []),
]

_BATCH: list[_Entry] = [
    ("wpnav_batch_get", "Fetch multiple WordPress items by ID in a single call", [_ITEMS]),
    ("wpnav_batch_update", "Update multiple WordPress items in a single call", [_ITEMS]),
    (
        "wpnav_batch_delete",
        "Delete multiple WordPress items in a single call",
        [_ITEMS, _CONFIRM],
    ),
]

_COOKBOOK: list[_Entry] = [
    ("wpnav_list_cookbooks", "List available plugin cookbooks", []),
    ("wpnav_get_cookbook", "Get guidance for a specific plugin", [_SLUG]),
    ("wpnav_match_cookbooks", "Match cookbooks against installed plugins", []),
]

_ROLES: list[_Entry] = [
    ("wpnav_list_roles", "List available AI roles", []),
    (
        "wpnav_load_role",
        "Switch the active AI role for this session",
        [ToolParameter(name="role", type="string", description="Role slug")],
    ),
]

# (name, description, feature flag)
_WORKFLOWS: list[tuple[str, str, str]] = [
    ("wpnav_run_workflow", "Run a multi-step AI workflow", WORKFLOWS_ENABLED),
    ("wpnav_bulk_validate", "Validate content in bulk", WP_BULK_VALIDATOR_ENABLED),
    ("wpnav_seo_audit", "Audit pages for SEO issues", WP_SEO_AUDIT_ENABLED),
    ("wpnav_review_content", "Review content for quality and style", WP_CONTENT_REVIEWER_ENABLED),
    ("wpnav_plan_migration", "Plan a content migration", WP_MIGRATION_PLANNER_ENABLED),
    (
        "wpnav_analyze_performance",
        "Analyze front-end and database performance",
        WP_PERFORMANCE_ANALYZER_ENABLED,
    ),
]

_BY_CATEGORY: list[tuple[ToolCategory, list[_Entry]]] = [
    (ToolCategory.CORE, _CORE),
    (ToolCategory.CONTENT, _CONTENT_TOOLS),
    (ToolCategory.TAXONOMY, _TAXONOMY),
    (ToolCategory.USERS, _USERS),
    (ToolCategory.PLUGINS, _PLUGINS),
    (ToolCategory.THEMES, _THEMES),
    (ToolCategory.SETTINGS, _SETTINGS),
    (ToolCategory.ANALYTICS, _ANALYTICS),
    (ToolCategory.DISCOVERY, _DISCOVERY),
    (ToolCategory.MAINTENANCE, _MAINTENANCE),
    (ToolCategory.AUTH, _AUTH),
    (ToolCategory.BATCH, _BATCH),
    (ToolCategory.COOKBOOK, _COOKBOOK),
    (ToolCategory.ROLES, _ROLES),
]


def get_builtin_tools() -> list[Tool]:
    """Build the built-in tools in registration order."""
    tools = [
        create_tool(
            "wpnav_help",
            "Get help and quickstart guide for WP Navigator",
            ToolCategory.CORE,
            aliases=["wpnav.help"],
        )
    ]

    for category, entries in _BY_CATEGORY:
        for name, description, parameters in entries:
            tools.append(create_tool(name, description, category, parameters))

    for name, description, flag in _WORKFLOWS:
        tools.append(
            create_tool(
                name,
                description,
                ToolCategory.WORKFLOWS,
                [ToolParameter(name="target", type="string", description="Target", required=False)],
                feature_flag=flag,
            )
        )

    return tools


def register_builtin_tools(
    registry: ToolRegistry, feature_flags: Optional[dict[str, bool]] = None
) -> ToolRegistry:
    """Register the built-in tools and set their feature flags.

    Args:
        registry: Registry to populate.
        feature_flags: Flag values to apply. Built-in flags not already set
            on the registry default to off.

    Returns:
        The same registry, for chaining.
    """
    registry.register_all(get_builtin_tools())

    existing = registry.feature_flags
    flags = {flag: False for flag in BUILTIN_FEATURE_FLAGS if flag not in existing}
    flags.update(feature_flags or {})
    for key, enabled in flags.items():
        registry.set_feature_flag(key, enabled)

    logger.debug(f"Registered {len(registry)} built-in tools")
    return registry
