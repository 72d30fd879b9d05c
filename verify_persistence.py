import time
import subprocess
import httpx
import sys
import os
import signal

BASE_URL = "http://127.0.0.1:8000"
API_PREFIX = "/v1"
SERVER_CMD = [sys.executable, "-m", "uvicorn", "trippacks.app.main:app", "--host", "127.0.0.1", "--port", "8000"]


def wait_for_server(retries=10, delay=2):
    url = f"{BASE_URL}/health"
    print(f"Waiting for server at {url}...")
    for i in range(retries):
        try:
            resp = httpx.get(url)
            if resp.status_code == 200:
                print("✅ Server is up!")
                return True
        except httpx.ConnectError:
            pass
        time.sleep(delay)
    print("❌ Server failed to start.")
    return False


def run_verification():
    # 1. Start Server (First Run)
    print("\n--- [Step 1] Starting Server (Initial) ---")
    proc = subprocess.Popen(
        SERVER_CMD,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env={**os.environ, "DB_ECHO": "True"}  # Enable echo to see SQL
    )

    try:
        if not wait_for_server():
            server_logs = proc.communicate(timeout=2)
            print("Server Stdout:", server_logs[0].decode())
            print("Server Stderr:", server_logs[1].decode())
            raise Exception("Server start failed")

        # 2. Create a trip pack
        print("\n--- [Step 2] Creating Trip Pack (Persistence Test) ---")
        payload = {
            "locations": ["Depot", "Market", "Harbour"],
            "received_date": time.strftime("%Y-%m-%d"),
        }
        resp = httpx.post(f"{BASE_URL}{API_PREFIX}/trip-packs", json=payload)

        if resp.status_code != 201:
            print(f"❌ Trip Pack Failed: {resp.status_code} {resp.text}")
            raise Exception("Trip pack creation failed")
        pack = resp.json()
        print("✅ Trip Pack Created")
        print(pack)

    finally:
        print("\n--- [Step 3] Stopping Server ---")
        proc.send_signal(signal.SIGTERM)
        proc.wait()

    time.sleep(2)  # Wait for port release

    # 3. Restart Server
    print("\n--- [Step 4] Restarting Server (Verification) ---")
    proc2 = subprocess.Popen(SERVER_CMD, stdout=subprocess.PIPE, stderr=subprocess.PIPE)

    try:
        if not wait_for_server():
            raise Exception("Server restart failed")

        # 4. Read the trip back
        print("\n--- [Step 5] Reading Trip (Post-Restart) ---")
        resp = httpx.get(f"{BASE_URL}{API_PREFIX}{pack['trip_uri']}")
        rows = resp.json().get("rows", []) if resp.status_code == 200 else []

        if rows and rows[0]["from_to"] == pack["from_to"]:
            print("✅ Trip Persisted")
            print(rows[0])
        else:
            print(f"❌ Trip Missing After Restart: {resp.status_code} {resp.text}")
            raise Exception("Trip lost after restart")

        # 5. Stops
        print("\n--- [Step 6] Verifying Stops ---")
        resp = httpx.get(f"{BASE_URL}{API_PREFIX}/stops", params={"trip_number": str(pack["trip_number"])})
        if resp.json()["count"] == len(payload["locations"]):
            print("✅ Stops Verified")
        else:
            print(f"❌ Stop Count Mismatch: {resp.json()['count']}")

    finally:
        print("\n--- [Step 7] Stopping Server ---")
        proc2.send_signal(signal.SIGTERM)
        proc2.wait()


if __name__ == "__main__":
    run_verification()
