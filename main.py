"""
Main entry point for BlockTheTweet Inference.
Supports serving over HTTP, one-off classification and offline evaluation.
"""

import argparse
import logging
import sys
from pathlib import Path

from blockthetweet.config import ServiceConfig, load_config, apply_overrides
from blockthetweet.errors import StartupFailure
from blockthetweet.inference.adapter import InferenceAdapter
from blockthetweet.inference.service import ClassificationService
from blockthetweet.models.scorer import build_scorer
from blockthetweet.storage.sink import PredictionSink
from blockthetweet.utils.logging import PredictionLogger, setup_logging
from blockthetweet.utils.preprocess import TextPreprocessor
from blockthetweet.utils.stemmer import Stemmer
from blockthetweet.utils.vocabulary import VocabularyIndex


logger = logging.getLogger("blockthetweet.main")


def initialize_service(config: ServiceConfig, prediction_logger: PredictionLogger = None) -> ClassificationService:
    """Load vocabulary, stemmer and model, and wire the classification service."""
    vocabulary = VocabularyIndex.from_json(config.vocabulary_path)
    logger.info(f"Loaded vocabulary of {len(vocabulary)} words from {config.vocabulary_path}")

    stemmer = Stemmer(config.stemmer_language)
    scorer = build_scorer(config.model)
    logger.info(f"Loaded scorer {scorer!r} (thread_safe={scorer.thread_safe})")

    preprocessor = TextPreprocessor(vocabulary, stemmer, config.sequence_length)
    return ClassificationService(preprocessor, InferenceAdapter(scorer), prediction_logger)


def run_server(config: ServiceConfig):
    """Initialize every resource, then start accepting connections."""
    import uvicorn
    from blockthetweet.api.app import create_app

    service = initialize_service(config)
    sink = PredictionSink(config.database_url) if config.storage_enabled else None
    app = create_app(service, config.app, sink)

    logger.info(f"{config.app.name} is running at port {config.port}")
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


def run_inference(text: str, config: ServiceConfig):
    """Run inference on a single text input."""
    service = initialize_service(config)
    result = service.classify(text)

    print("\n" + "="*80)
    print("INFERENCE RESULT")
    print("="*80)
    print(f"Input:              {text}")
    print(f"Text Hash:          {result.content_hash}")
    if result.ok:
        data = result.prediction.to_response_data()
        print(f"Confidence:         {data['confidence']}")
        print(f"Latency:            {data['nanosecond']} ns")
        print(f"OOV Rate:           {service.preprocessor.oov_rate(text):.2%}")
    else:
        print(f"Failure:            {result.failure}")
    print("="*80)

    return result


def run_evaluation(config: ServiceConfig):
    """Run offline evaluation benchmark."""
    from blockthetweet.evaluation.benchmark import Benchmark
    from blockthetweet.evaluation.sample_data import generate_sample_texts

    prediction_logger = PredictionLogger(keep_history=True)
    service = initialize_service(config, prediction_logger)

    print(f"Generating {config.eval_num_samples} evaluation samples...")
    texts, labels = generate_sample_texts(num_samples=config.eval_num_samples, seed=config.eval_seed)

    benchmark = Benchmark(service, threshold=config.eval_threshold)
    results = benchmark.run(texts, labels)
    results['logger_statistics'] = prediction_logger.get_statistics()
    benchmark.print_results(results)

    path = benchmark.export(results, config.eval_output_dir)
    prediction_logger.export_records(str(Path(config.eval_output_dir) / "predictions.json"))
    print(f"\nResults written to {path}")

    return results


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="BlockTheTweet Inference - serve tweet block-confidence scores over HTTP"
    )
    parser.add_argument(
        '--mode',
        type=str,
        choices=['serve', 'inference', 'evaluate'],
        default='serve',
        help='Mode: serve the HTTP API, inference for single input, evaluate for offline benchmark'
    )
    parser.add_argument('--text', type=str, help='Input text for inference mode')
    parser.add_argument('--config', type=str, default='config.yaml', help='Path to configuration file')
    parser.add_argument('--model', type=str, help='Path to the TorchScript model')
    parser.add_argument('--vocabulary', type=str, help='Path to the word index JSON')
    parser.add_argument('--language', type=str, help='Snowball stemmer language')
    parser.add_argument('--sequence-length', type=int, help='Fixed input length of the model')
    parser.add_argument('--host', type=str, help='Listening address')
    parser.add_argument('--port', type=int, help='Listening port')

    args = parser.parse_args()

    if args.mode == 'inference' and not args.text:
        parser.error("--text required for inference mode")

    try:
        config = load_config(args.config) if Path(args.config).exists() else ServiceConfig()
        config = apply_overrides(config, {
            'model': args.model,
            'vocabulary': args.vocabulary,
            'language': args.language,
            'sequence_length': args.sequence_length,
            'host': args.host,
            'port': args.port,
        })
        setup_logging(config.log_level, config.log_file)

        if args.mode == 'serve':
            run_server(config)
        elif args.mode == 'inference':
            run_inference(args.text, config)
        elif args.mode == 'evaluate':
            run_evaluation(config)
    except StartupFailure as e:
        logging.getLogger("blockthetweet").error(f"Startup failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
