import threading
import webbrowser

import uvicorn

from agentforge.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    url = f"http://{settings.web.host}:{settings.web.port}/docs"
    print(f"Launching AgentForge web service on {url}")

    if settings.web.auto_open_browser:
        threading.Timer(1.5, lambda: webbrowser.open(url)).start()

    uvicorn.run("web_app:app", host=settings.web.host, port=settings.web.port, reload=False)
