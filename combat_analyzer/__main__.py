import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "combat_analyzer.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("APP_ENV", "local") == "local",
    )


if __name__ == "__main__":
    main()
