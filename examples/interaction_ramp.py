"""調和トラップ中のLieb-Liniger気体に相互作用ランプをかける計算例

使い方:
    python examples/interaction_ramp.py --config examples/interaction_ramp.yml
"""

import argparse
import sys
from pathlib import Path

import numpy as np

from ghd import (
    AdvectionSolver,
    CorrelatorEngine,
    Couplings,
    DeparturePointSolver,
    DressingSolver,
    EffectiveFieldComputer,
    GHDError,
    LiebLinigerModel,
    PhaseSpaceField,
    compute_charges,
)
from ghd.config import SimulationConfig
from ghd.logger import SimulationLogger


def parse_args():
    """コマンドライン引数をパース"""
    parser = argparse.ArgumentParser(description="Lieb-Liniger気体の相互作用ランプ")
    parser.add_argument("--config", type=str, required=True, help="設定ファイルのパス")
    parser.add_argument("--t-max", type=float, default=0.5, help="終了時刻")
    parser.add_argument("--n-steps", type=int, default=50, help="時間ステップ数")
    parser.add_argument("--output", type=str, default="results/ramp.npz", help="出力ファイル")
    parser.add_argument("--debug", action="store_true", help="デバッグモードを有効化")
    return parser.parse_args()


def create_couplings(mu0=2.0, omega=1.0, c0=1.0, rate=0.5):
    """μ(x) = μ0 − ω²x²、c(t) = c0·(1 + rate·t) の結合定数テーブル"""
    return Couplings.from_functions(
        mu=lambda t, x: mu0 - omega**2 * x**2,
        c=lambda t, x: c0 * (1.0 + rate * t),
        dmu_dx=lambda t, x: -2.0 * omega**2 * x,
        dc_dt=lambda t, x: c0 * rate,
    )


def initial_filling(model, temperature=0.5):
    """局所密度近似でのフェルミ分布に近い初期占有関数"""
    energy = model.bare_energy(0.0)
    return PhaseSpaceField(model.grid, 1.0 / (1.0 + np.exp(energy.data / temperature)))


def main():
    """メイン関数"""
    args = parse_args()
    config = SimulationConfig.from_yaml(args.config)
    if args.debug:
        config.logging.level = "debug"
        config.logging.console_logging["level"] = "debug"
    logger = SimulationLogger("ghd.ramp", config.logging)

    grid = config.grid.build()
    model = LiebLinigerModel(grid, create_couplings(), logger=logger)
    dressing = DressingSolver(
        model, condition_limit=config.dressing.condition_limit, logger=logger
    )
    effective_fields = EffectiveFieldComputer(
        model,
        dressing=dressing,
        degeneracy_threshold=config.dressing.degeneracy_threshold,
        logger=logger,
    )
    departure = DeparturePointSolver(
        model, config.departure, effective_fields=effective_fields, logger=logger
    )
    solver = AdvectionSolver(
        model, config.departure, departure_solver=departure, logger=logger
    )

    t_array = np.linspace(0.0, args.t_max, args.n_steps + 1)
    theta_init = initial_filling(model)

    try:
        result = solver.propagate(theta_init, t_array)
    except GHDError as e:
        logger.error(f"時間発展中にエラーが発生: {e}")
        return 1
    logger.log_performance("propagate", solver.elapsed_time)

    engine = CorrelatorEngine(model, dressing=dressing, logger=logger)
    n = config.correlator.n
    correlators = engine.local_correlators(n, result.theta, t_array)
    densities = np.stack(
        [
            compute_charges(model, dressing, theta, 0, t)
            for theta, t in zip(result.theta, t_array)
        ],
        axis=1,
    )

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    np.savez(
        output,
        t=t_array,
        x=grid.x_grid,
        rapidity=grid.rapid_grid,
        theta=np.stack([theta.data for theta in result.theta]),
        density=densities,
        correlator=correlators,
    )
    logger.info(f"g_{n} と密度を保存: {output}")
    if not result.converged:
        logger.warning("一部のステップで出発点の反復が収束しませんでした")
    return 0


if __name__ == "__main__":
    sys.exit(main())
