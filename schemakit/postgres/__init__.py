"""PostgreSQL schema definitions, catalog queries, parsing, discovery and writing."""