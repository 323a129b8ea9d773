# identity_service/main.py
from fastapi import FastAPI, Header, HTTPException

app = FastAPI(title="Identity Gateway (dev mock)")


USERS = {
    "dev-token-sara": {"id": "0b6f7c1e-6a43-4d5e-9b1f-3f1f0f6f2a01", "email": "sara@example.com"},
    "dev-token-reza": {"id": "5d2e8a90-1c3b-4f7a-8e6d-7a9b0c1d2e03", "email": "reza@example.com"},
}


@app.get("/auth/v1/user")
def get_user(authorization: str | None = Header(default=None)):
    token = (authorization or "").replace("Bearer ", "", 1).strip()
    user = USERS.get(token)
    if not user:
        raise HTTPException(status_code=401, detail="invalid JWT")
    return user
