# Store for tools configuration
TOOLS = [
    {
        "id": "text-diff",
        "name": "Text Diff Tool",
        "description": "Compare two texts line by line with statistics, unified diff and patch export",
        "path": "/api/text-diff/compare",
        "tags": ["diff", "compare", "text", "patch"],
        "icon": "⚖️"
    },
    {
        "id": "cron-parser",
        "name": "Cron Parser",
        "description": "Parse and analyze cron expressions with human-readable descriptions and next execution times",
        "path": "/api/cron-parser/parse",
        "tags": ["cron", "scheduler", "parser", "time", "unix"],
        "icon": "⏰"
    },
]
