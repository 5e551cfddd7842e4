"""Interactive CLI simulator — walk the registration and reset flows."""

import asyncio

from fitora.services.otp_client import OTPAPIClient

BLUE = "\033[94m"
GREEN = "\033[92m"
RED = "\033[91m"
YELLOW = "\033[93m"
DIM = "\033[2m"
BOLD = "\033[1m"
RESET = "\033[0m"


def _show(result) -> None:
    colour = GREEN if result.success else RED
    print(f"{colour}{BOLD}Server:{RESET} {result.message}")
    if result.otp:
        print(f"{DIM}(dev) OTP: {result.otp}{RESET}")
    print()


async def main() -> None:
    print(f"\n{BOLD}{'=' * 52}")
    print("  👗  Fitora — OTP Flow Simulator")
    print(f"{'=' * 52}{RESET}\n")

    # ── Start the API in the background ───────────────────
    import uvicorn
    from fitora.main import app

    config = uvicorn.Config(app, host="127.0.0.1", port=8000, log_level="warning")
    server = uvicorn.Server(config)
    server_task = asyncio.create_task(server.serve())

    # Give the server a moment to start
    await asyncio.sleep(0.5)

    client = OTPAPIClient("http://127.0.0.1:8000/api")

    print(f"{DIM}Commands: register, reset, quit{RESET}\n")
    while True:
        try:
            command = input(f"{BLUE}{BOLD}>{RESET} ").strip().lower()
        except (KeyboardInterrupt, EOFError):
            print(f"\n{DIM}Goodbye!{RESET}")
            break

        if command == "quit":
            print(f"{DIM}Goodbye!{RESET}")
            break

        if command not in ("register", "reset"):
            if command:
                print(f"{YELLOW}Unknown command{RESET}\n")
            continue

        purpose = "registration" if command == "register" else "password-reset"
        email = input(f"{YELLOW}Email: {RESET}").strip()
        _show(await client.send_otp(email, purpose))

        otp = input(f"{YELLOW}OTP: {RESET}").strip()
        verified = await client.verify_otp(email, otp, purpose)
        _show(verified)
        if not verified.success or purpose == "registration":
            continue

        new_password = input(f"{YELLOW}New password: {RESET}")
        _show(await client.reset_password(email, otp, new_password))

    # Shut down the background server
    server.should_exit = True
    await server_task


if __name__ == "__main__":
    asyncio.run(main())
