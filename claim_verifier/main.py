"""Main script for running the claim verifier."""

import asyncio
import logging

from rich.console import Console
from rich.table import Table

from .domain.models.verification import VerificationResult, VerificationStatus
from .infrastructure.dependencies import get_service_container

logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

console = Console()

STATUS_STYLES = {
    VerificationStatus.VERIFIED: "bold green",
    VerificationStatus.FALSE: "bold red",
    VerificationStatus.DISPUTED: "bold yellow",
    VerificationStatus.UNVERIFIED: "bold white",
}


def render(result: VerificationResult) -> None:
    """Print a verification result."""
    style = STATUS_STYLES[result.status]
    console.print(f"\n[{style}]{result.status.value}[/{style}] (confidence {result.confidence:.0%})")
    console.print(f"Tier: {result.metadata.tier.value if result.metadata.tier else 'n/a'}")
    console.print(f"\n{result.explanation}")

    if result.evidence:
        table = Table(title="Evidence")
        table.add_column("#", justify="right")
        table.add_column("Source")
        table.add_column("Content")
        table.add_column("URL")
        for i, evidence in enumerate(result.evidence, 1):
            table.add_row(str(i), evidence.source.name, evidence.content[:120], evidence.url)
        console.print(table)


async def main():
    """Run the claim verifier."""
    console.print("[bold]Claim Verifier[/bold] - tiered verification with fact-checks, references and AI")
    console.print("-----------------------------------------------------")

    container = get_service_container()
    service = await container.get_fact_checking_service()

    try:
        while True:
            # Get claim from user
            claim = console.input("\nEnter a claim to verify (or 'quit' to exit): ")
            if claim.lower() in ('quit', 'exit', 'q'):
                break

            with console.status("Verifying..."):
                result = await service.verify_claim(claim)
            render(result)

    finally:
        # Clean up
        await container.shutdown()


def run():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
