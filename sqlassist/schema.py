"""sqlassist.schema

Static schema of the demo database.

`SCHEMA_SQL` is what the `schema` tool returns to the model; `DDL_STATEMENTS`
and `SAMPLE_ROWS` are used by scripts/init_demo_db.py and the tests.
"""

from __future__ import annotations

SCHEMA_SQL = """CREATE TABLE products (
    id integer PRIMARY KEY AUTOINCREMENT NOT NULL,
    name text NOT NULL,
    category text NOT NULL,
    price real NOT NULL,
    stock integer DEFAULT 0 NOT NULL,
    created_at text DEFAULT CURRENT_TIMESTAMP
)

CREATE TABLE sales (
    id integer PRIMARY KEY AUTOINCREMENT NOT NULL,
    product_id integer NOT NULL,
    quantity integer NOT NULL,
    total_amount real NOT NULL,
    sale_date text DEFAULT CURRENT_TIMESTAMP,
    customer_name text NOT NULL,
    region text NOT NULL,
    FOREIGN KEY (product_id) REFERENCES products(id) ON UPDATE no action ON DELETE no action
)"""

QUERY_LOGS_DDL = """CREATE TABLE IF NOT EXISTS query_logs (
    id integer PRIMARY KEY AUTOINCREMENT NOT NULL,
    preview_id text,
    executed_at text NOT NULL,
    query text NOT NULL,
    user_id text
)"""

DDL_STATEMENTS = [
    stmt.replace("CREATE TABLE ", "CREATE TABLE IF NOT EXISTS ", 1)
    for stmt in SCHEMA_SQL.split("\n\n")
] + [QUERY_LOGS_DDL]

SAMPLE_ROWS: dict[str, list[tuple]] = {
    "products": [
        (1, "Laptop Pro 14", "Electronics", 1299.0, 25),
        (2, "Wireless Mouse", "Accessories", 24.5, 300),
        (3, "Standing Desk", "Furniture", 499.0, 40),
    ],
    "sales": [
        (1, 1, 2, 2598.0, "2025-01-15", "alice.smith@example.com", "EMEA"),
        (2, 2, 10, 245.0, "2025-01-17", "Bob Jones", "NA"),
        (3, 3, 1, 499.0, "2025-02-02", "call +1 415-555-0134", "APAC"),
    ],
}


def create_demo_database(db, with_audit_table: bool = True) -> None:
    """Create the demo tables on `db` (a DataStore) and insert the sample rows once."""
    for stmt in DDL_STATEMENTS:
        if stmt == QUERY_LOGS_DDL and not with_audit_table:
            continue
        db.run(stmt)

    db.run(
        "INSERT OR IGNORE INTO products (id, name, category, price, stock) VALUES "
        + ", ".join(["(?, ?, ?, ?, ?)"] * len(SAMPLE_ROWS["products"])),
        [v for row in SAMPLE_ROWS["products"] for v in row],
    )
    db.run(
        "INSERT OR IGNORE INTO sales (id, product_id, quantity, total_amount, sale_date, customer_name, region) VALUES "
        + ", ".join(["(?, ?, ?, ?, ?, ?, ?)"] * len(SAMPLE_ROWS["sales"])),
        [v for row in SAMPLE_ROWS["sales"] for v in row],
    )
