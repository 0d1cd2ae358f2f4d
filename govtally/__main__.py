from govtally.cli import app

app()
