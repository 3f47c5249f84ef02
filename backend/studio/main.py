from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studio.api.routes import router
from studio.config import CORS_ORIGINS, KROKI_URL

app = FastAPI(
    title="Diagram Studio",
    version="0.1.0",
)

# ✅ Middleware FIRST
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ Routes AFTER middleware
app.include_router(router)


@app.on_event("startup")
def startup():
    print(f"✅ Diagram studio ready (renderer: {KROKI_URL})")
