from __future__ import annotations


def initial_schema() -> list[str]:
    return [
        """
        CREATE TABLE IF NOT EXISTS schema_version (
          version INTEGER NOT NULL
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS clients (
          id TEXT PRIMARY KEY,
          first_name TEXT NOT NULL,
          last_name TEXT NOT NULL,
          date_of_birth TEXT,
          email TEXT,
          phone TEXT,
          address TEXT,
          city TEXT,
          state TEXT,
          zip_code TEXT,
          status TEXT DEFAULT 'active'
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS cases (
          id TEXT PRIMARY KEY,
          case_number TEXT NOT NULL UNIQUE,
          client_id TEXT,
          charge_type TEXT,
          charge_description TEXT,
          status TEXT DEFAULT 'open',
          court_date TEXT,
          arrest_date TEXT,
          FOREIGN KEY (client_id) REFERENCES clients(id)
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS bonds (
          id TEXT PRIMARY KEY,
          bond_number TEXT NOT NULL UNIQUE,
          client_id TEXT,
          case_id TEXT,
          bond_type TEXT,
          bond_amount TEXT,
          premium_amount TEXT,
          status TEXT DEFAULT 'active',
          issue_date TEXT,
          FOREIGN KEY (client_id) REFERENCES clients(id),
          FOREIGN KEY (case_id) REFERENCES cases(id)
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS payments (
          id TEXT PRIMARY KEY,
          transaction_id TEXT,
          bond_id TEXT,
          client_id TEXT,
          amount TEXT,
          payment_type TEXT,
          payment_method TEXT,
          status TEXT DEFAULT 'completed',
          payment_date TEXT,
          FOREIGN KEY (bond_id) REFERENCES bonds(id),
          FOREIGN KEY (client_id) REFERENCES clients(id)
        );
        """,
        """
        CREATE TABLE IF NOT EXISTS documents (
          id TEXT PRIMARY KEY,
          file_name TEXT,
          category TEXT,
          upload_date TEXT,
          related_id TEXT,
          related_type TEXT
        );
        """,
        "CREATE INDEX IF NOT EXISTS idx_cases_client ON cases(client_id);",
        "CREATE INDEX IF NOT EXISTS idx_bonds_client ON bonds(client_id);",
        "CREATE INDEX IF NOT EXISTS idx_payments_bond ON payments(bond_id);",
    ]


def schema_v2() -> list[str]:
    return [
        """
        CREATE TABLE IF NOT EXISTS client_checkins (
          id TEXT PRIMARY KEY,
          client_id TEXT NOT NULL,
          bond_id TEXT,
          status TEXT DEFAULT 'completed',
          location_name TEXT,
          created_at TEXT,
          FOREIGN KEY (client_id) REFERENCES clients(id),
          FOREIGN KEY (bond_id) REFERENCES bonds(id)
        );
        """,
        "CREATE INDEX IF NOT EXISTS idx_checkins_client ON client_checkins(client_id);",
    ]
