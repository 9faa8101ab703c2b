# sqlitekit/auth/schema.py
"""Fixed layout of the authentication tables.

Every table also gets the implicit ``id INTEGER PRIMARY KEY AUTOINCREMENT``
column from ``SqliteCrud.create_table``.
"""

USERS = "users"
GROUPS = "groups"
PERMISSIONS = "permissions"
SESSIONS = "sessions"
USERS_AND_GROUPS = "users_and_groups"
PERMISSIONS_AND_GROUPS = "permissions_and_groups"

# Creation order matters: referenced tables come first.
AUTH_TABLES = (
    (USERS, "name VARCHAR(255) UNIQUE NOT NULL, email VARCHAR(255) UNIQUE NOT NULL, password TEXT NOT NULL"),
    (GROUPS, "name VARCHAR(255) NOT NULL, description TEXT"),
    (PERMISSIONS, "name VARCHAR(255) NOT NULL, description TEXT"),
    (SESSIONS, "id_user INTEGER NOT NULL, token VARCHAR(255) UNIQUE NOT NULL, "
               "FOREIGN KEY (id_user) REFERENCES users (id) ON DELETE CASCADE"),
    (USERS_AND_GROUPS, "name VARCHAR(255), id_user INTEGER NOT NULL, id_group INTEGER NOT NULL, "
                       "FOREIGN KEY (id_user) REFERENCES users (id) ON DELETE CASCADE, "
                       "FOREIGN KEY (id_group) REFERENCES `groups` (id) ON DELETE CASCADE"),
    (PERMISSIONS_AND_GROUPS, "name VARCHAR(255), id_permission INTEGER NOT NULL, id_group INTEGER NOT NULL, "
                             "FOREIGN KEY (id_permission) REFERENCES permissions (id) ON DELETE CASCADE, "
                             "FOREIGN KEY (id_group) REFERENCES `groups` (id) ON DELETE CASCADE"),
)

ADMIN_GROUP = {"name": "administrators", "description": "Users with full control of the database"}
ADMIN_PERMISSION = {"name": "administrate", "description": "Full control of the database"}

CREDENTIALS_SQL = """
SELECT
    g.id AS group_id,
    g.name AS group_name,
    g.description AS group_description,
    p.id AS permission_id,
    p.name AS permission_name,
    p.description AS permission_description
FROM `users` AS u
JOIN `users_and_groups` AS ug ON ug.id_user = u.id
JOIN `groups` AS g ON g.id = ug.id_group
LEFT JOIN `permissions_and_groups` AS pg ON pg.id_group = g.id
LEFT JOIN `permissions` AS p ON p.id = pg.id_permission
WHERE u.id = ?
ORDER BY g.id, p.id
"""
