import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import argparse
import logging


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Deploy, fund and finalize a crowdsale on an in-process chain.")

    parser.add_argument("--config", type=str, default=None, help="Path to YAML config file")
    parser.add_argument("--artifacts", type=str, help="Directory with compiled contract JSON artifacts")
    parser.add_argument("--rate", type=int, default=100000000000, help="Initial rate in tokens per wei")
    parser.add_argument("--funding", nargs=5, default=["40", "30", "20", "10", "0"],
                        help="Tokens bought by each of the five participants")
    parser.add_argument("--wei-per-usd", type=int, default=1, help="Exchange rate set before the sale opens")
    parser.add_argument("--total-supply", type=str, default=None, help="Expected total supply after finalization")
    # bonus tiers and wei rounding mean final balances need not equal --funding
    parser.add_argument("--balances", nargs=5, default=None,
                        help="Expected final balances of the five participants")

    return parser.parse_args(argv)


def main():

    from crowdsale_testkit.config import load_config, setup_logging
    from crowdsale_testkit.chain import ChainClient, ContractArtifact
    from crowdsale_testkit.crowdsale.checks import check_token
    from crowdsale_testkit.crowdsale.sale import CrowdsaleConfig
    from crowdsale_testkit.crowdsale.simulation import simulate_crowdsale
    from dotenv import load_dotenv

    load_dotenv()
    args = parse_args()

    config = load_config(args.config)

    # Set up logging from config
    log_level = getattr(logging, config.logging_level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    setup_logging(config)
    logger = logging.getLogger(__name__)

    artifacts_dir = args.artifacts or config.artifacts_dir
    crowdsale_artifact = ContractArtifact.load(artifacts_dir, config.crowdsale_contract)
    token_artifact = ContractArtifact.load(artifacts_dir, config.token_contract)

    client = ChainClient(config)
    sale = simulate_crowdsale(
        client,
        crowdsale_artifact,
        CrowdsaleConfig.tiered(args.rate),
        args.funding,
        args.wei_per_usd,
        token_artifact=token_artifact,
    )

    snapshot = check_token(sale.token, client.pool, total_supply=args.total_supply, balances=args.balances)
    logger.info(f"Total supply {snapshot.total_supply}, balances {[str(b) for b in snapshot.balances]}")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logging.shutdown()
        sys.exit(0)
