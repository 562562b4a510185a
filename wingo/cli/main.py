import typer
import requests
from wingo.config import settings


app = typer.Typer()
BASE = settings.api_base


def _headers():
    h = {}
    if settings.api_key:
        h["X-API-Key"] = settings.api_key
    return h


@app.command()
def predict(refresh: bool = typer.Option(True)):
    r = requests.get(f"{BASE}/predict", params={"refresh": refresh}, headers=_headers())
    typer.echo(r.json())


@app.command()
def stats():
    r = requests.get(f"{BASE}/stats", headers=_headers())
    typer.echo(r.json())


@app.command()
def weights():
    r = requests.get(f"{BASE}/weights", headers=_headers())
    typer.echo(r.json())


@app.command()
def history(limit: int = 20):
    r = requests.get(f"{BASE}/history", params={"limit": limit}, headers=_headers())
    for item in r.json().get("items", []):
        typer.echo(f"{item['period']}  {item['prediction']:<5} {item['confidence']:>3}%  "
                   f"{item['tier']:<10} {item['status']}")


@app.command()
def train():
    r = requests.post(f"{BASE}/train", headers=_headers())
    typer.echo(r.json())


@app.command()
def refresh():
    r = requests.post(f"{BASE}/refresh", headers=_headers())
    typer.echo(r.json())


if __name__ == "__main__":
    app()
