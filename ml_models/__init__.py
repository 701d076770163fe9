"""
ml_models — handwritten character classifier.

Components:
  labels         — fixed label set + label → explanation lookup
  architecture   — CharacterClassifier CNN (demo-mode fallback network)
  image_encoder  — upload bytes → (1, 3, 224, 224) tensor
  predictor      — model loading (TorchScript from MODEL_URL) + inference
"""
