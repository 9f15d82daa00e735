"""
Access Configuration
This config defines the operation matrix for every resource exposed by the API.
Each operation is named "<resource>:<action>" and classified as read or write.
Reads are public; writes require the admin role (see app.core.dependencies).
"""

ADMIN_ROLE = "admin"

# Define resources and their actions
MODULES = {
    "projects": {
        "resource": "projects",
        "read": ["list", "read", "read_themes"],
        "write": ["create", "update", "delete"],
        "description": "Project management"
    },
    "themes": {
        "resource": "themes",
        "read": ["list", "read", "read_team"],
        "write": ["create", "update", "delete", "add_members", "remove_member", "assign_head"],
        "description": "Theme management and membership"
    },
    "team": {
        "resource": "team",
        "read": ["list", "read"],
        "write": ["create", "update", "delete"],
        "description": "Team member management"
    },
    "admin": {
        "resource": "admin",
        "read": [],
        "write": ["create", "read"],
        "description": "Admin account management"
    }
}

# Descriptions for actions that are not plain CRUD
ACTION_DESCRIPTIONS = {
    "themes": {
        "add_members": "Add team members to a theme",
        "remove_member": "Remove a team member from a theme",
        "assign_head": "Assign or clear a theme head"
    },
    "projects": {
        "read_themes": "Read a project with its themes"
    }
}


def get_operation_matrix():
    """
    Returns a dictionary keyed by operation name.
    Format: {
        "projects:create": {"resource": "projects", "action": "create", "write": True, "description": "..."},
        ...
    }
    """
    operations = {}

    for module_name, module_config in MODULES.items():
        resource = module_config["resource"]
        for kind in ("read", "write"):
            for action in module_config[kind]:
                description = f"{action.replace('_', ' ').capitalize()} {resource}"
                if module_name in ACTION_DESCRIPTIONS and action in ACTION_DESCRIPTIONS[module_name]:
                    description = ACTION_DESCRIPTIONS[module_name][action]
                operations[f"{resource}:{action}"] = {
                    "resource": resource,
                    "action": action,
                    "write": kind == "write",
                    "description": description
                }

    return operations


OPERATION_MATRIX = get_operation_matrix()


def is_write_operation(operation: str) -> bool:
    """Unknown operations are treated as writes."""
    entry = OPERATION_MATRIX.get(operation)
    return entry is None or entry["write"]
